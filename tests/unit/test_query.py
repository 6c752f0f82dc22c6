"""Unit tests for the command-line runner."""

from unittest.mock import AsyncMock, patch

import pytest

import query
from recipe_generator.models.models import GeneratedRecipe
from recipe_generator.utils.errors import UpstreamHttpError


class TestParseArgs:
    def test_prompt_only(self):
        assert query.parse_args(["quick", "breakfast"]) == ("quick breakfast", [], [], False)

    def test_flags(self):
        argv = ["--debug", "--ingredient", "egg", "--diet", "Vegan", "--ingredient", "flour", "pancakes"]

        assert query.parse_args(argv) == ("pancakes", ["egg", "flour"], ["Vegan"], True)

    def test_missing_flag_value(self):
        with pytest.raises(ValueError, match="--ingredient"):
            query.parse_args(["--ingredient"])

    def test_unknown_flag(self):
        with pytest.raises(ValueError, match="Unknown flag"):
            query.parse_args(["--verbose"])


class TestRunQuery:
    def test_prints_recipe(self, valid_recipe):
        recipe = GeneratedRecipe(**valid_recipe)
        with patch("query.generate_recipe", AsyncMock(return_value=recipe)), patch.object(query, "console") as console:
            query.run_query("pancakes", ["egg"], [])

        rendered = console.print.call_args.args[0]
        assert rendered.markup == recipe.to_markdown()

    def test_no_input_exits_2(self):
        with pytest.raises(SystemExit) as exc:
            query.run_query("", [], [])
        assert exc.value.code == 2

    def test_upstream_failure_exits_1(self):
        failing = AsyncMock(side_effect=UpstreamHttpError(500, "boom"))
        with patch("query.generate_recipe", failing), patch.object(query, "console"):
            with pytest.raises(SystemExit) as exc:
                query.run_query("soup", [], [])
        assert exc.value.code == 1
