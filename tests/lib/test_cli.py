"""Tests for classroom.lib.cli parameter types."""

from __future__ import annotations

import pytest

import classroom.lib.cli as click
from classroom.model import AssessmentID, DeploymentEnvironment


class TestKeyParamType(object):
    def test_prefixed(self) -> None:
        """A full key converts to the key type."""
        aid = AssessmentID()

        result = click.KeyParamType(AssessmentID).convert(str(aid), None, None)

        assert result == aid
        assert isinstance(result, AssessmentID)

    def test_bare(self) -> None:
        """The key part alone is accepted."""
        aid = AssessmentID()

        assert click.KeyParamType(AssessmentID).convert(aid.key, None, None) == aid

    def test_invalid(self) -> None:
        """A malformed key fails conversion."""
        with pytest.raises(click.BadParameter):
            click.KeyParamType(AssessmentID).convert("asmt$nope", None, None)


class TestEnumType(object):
    def test_convert(self) -> None:
        assert click.EnumType(DeploymentEnvironment).convert("test", None, None) is DeploymentEnvironment.Test

    def test_invalid(self) -> None:
        """Unknown values list the valid ones."""
        with pytest.raises(click.BadParameter, match="production"):
            click.EnumType(DeploymentEnvironment).convert("staging", None, None)
