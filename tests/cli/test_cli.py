"""Tests for the ontogenesis CLI."""

import orjson
import pytest
from typer.testing import CliRunner

from ontogenesis.cli.main import app, resolve_templates
from ontogenesis.exceptions import TemplateNotFoundError
from ontogenesis.types import KernelType

runner = CliRunner()

QUIET = {"ONTOGENESIS_LOG_LEVEL": "WARNING"}


def test_templates_lists_catalog():
    result = runner.invoke(app, ["templates"])

    assert result.exit_code == 0
    for kernel_type in ("inference", "reasoning", "memory", "meta"):
        assert kernel_type in result.stdout


def test_run_json():
    result = runner.invoke(app, ["run", "-g", "3", "-s", "1", "--json"], env=QUIET)

    assert result.exit_code == 0
    state = orjson.loads(result.stdout)
    assert state["generation"] == 3
    assert [p["name"] for p in state["populations"]] == [
        "inference", "reasoning", "memory", "meta",
    ]
    for population in state["populations"]:
        assert population["generation"] == 3
        assert 0 < population["size"] <= 12
        assert 0 < population["statistics"]["diversity_index"] <= 1
    assert state["total_kernels_created"] >= 20


def test_run_single_type():
    result = runner.invoke(
        app, ["run", "-g", "2", "-s", "4", "--type", "inference", "--json"], env=QUIET
    )

    assert result.exit_code == 0
    state = orjson.loads(result.stdout)
    assert [p["name"] for p in state["populations"]] == ["inference"]


def test_run_is_reproducible():
    args = ["run", "-g", "4", "-s", "11", "--json"]

    first = orjson.loads(runner.invoke(app, args, env=QUIET).stdout)
    second = orjson.loads(runner.invoke(app, args, env=QUIET).stdout)

    def stats(state):
        return [
            (p["size"], p["statistics"]["average_fitness"], p["statistics"]["fitness_trend"])
            for p in state["populations"]
        ]

    assert stats(first) == stats(second)


def test_run_table_output():
    result = runner.invoke(app, ["run", "-g", "1", "-s", "2"], env=QUIET)

    assert result.exit_code == 0
    assert "Evolution Summary" in result.stdout


def test_run_unknown_type():
    result = runner.invoke(app, ["run", "--type", "telepathy"], env=QUIET)

    assert result.exit_code == 1
    assert "telepathy" in result.stdout


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "ontogenesis v" in result.stdout


def test_resolve_templates():
    assert len(resolve_templates([])) == 4
    assert [t.type for t in resolve_templates(["meta", "memory"])] == [
        KernelType.META, KernelType.MEMORY,
    ]


def test_resolve_templates_without_catalog_entry():
    with pytest.raises(TemplateNotFoundError):
        resolve_templates(["perception"])
