from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from capmanifest.cli import app

VIEWER_MANIFEST = """
viewer:
  name: vizarr
  version: 0.1.0
  template_url: https://hms-dbmi.github.io/vizarr/?source={DATA_URL}
capabilities:
  ome_zarr_versions: [0.4]
  axes: true
  channels: true
"""

OLD_VIEWER_MANIFEST = """
viewer:
  name: legacy
  version: 0.9
capabilities:
  ome_zarr_versions: [0.1, 0.2]
"""


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def write_inputs(tmp_path: Path) -> tuple[Path, list[str]]:
    metadata_path = tmp_path / "metadata.json"
    metadata_path.write_text(
        json.dumps({"version": "0.4", "axes": [{"name": "c", "type": "channel"}, {"name": "y"}, {"name": "x"}]}),
        encoding="utf-8",
    )
    viewer = tmp_path / "vizarr.yaml"
    legacy = tmp_path / "legacy.yaml"
    viewer.write_text(VIEWER_MANIFEST, encoding="utf-8")
    legacy.write_text(OLD_VIEWER_MANIFEST, encoding="utf-8")
    return metadata_path, [str(viewer), str(legacy)]


def test_cli_checks_dataset_and_writes_output(tmp_path: Path, runner: CliRunner) -> None:
    metadata_path, manifests = write_inputs(tmp_path)
    output_path = tmp_path / "report.json"

    args = ["--dataset", str(metadata_path), "--output", str(output_path)]
    for manifest in manifests:
        args.extend(["--manifest", manifest])
    args.extend(["--data-url", "https://data.example/a.zarr"])

    result = runner.invoke(app, args)

    assert result.exit_code == 0, result.output
    assert "vizarr (0.1.0): compatible" in result.output
    assert "legacy" not in result.output
    assert "1 of 2 viewers can open the dataset (OME-Zarr 0.4)." in result.output

    rendered = json.loads(output_path.read_text(encoding="utf-8"))
    assert [item["name"] for item in rendered["results"]] == ["vizarr"]
    assert rendered["results"][0]["launch_url"].endswith("source=https%3A%2F%2Fdata.example%2Fa.zarr")


def test_cli_all_with_details_lists_errors(tmp_path: Path, runner: CliRunner) -> None:
    metadata_path, manifests = write_inputs(tmp_path)

    args = ["--dataset", str(metadata_path), "--all", "--details"]
    for manifest in manifests:
        args.extend(["--manifest", manifest])

    result = runner.invoke(app, args)

    assert result.exit_code == 0, result.output
    assert "legacy (0.9): incompatible" in result.output
    assert "error [ome_zarr_versions]: Viewer does not support OME-Zarr v0.4 (supports: 0.1, 0.2)" in result.output
    assert "error [channels]" in result.output
    assert "warning [axes]" in result.output


def test_cli_uses_registry_from_config(tmp_path: Path, runner: CliRunner) -> None:
    metadata_path, manifests = write_inputs(tmp_path)
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "registry:\n"
        f"  - name: vizarr\n    manifest_url: {manifests[0]}\n"
        "loader:\n  max_workers: 1\n",
        encoding="utf-8",
    )

    result = runner.invoke(app, ["--dataset", str(metadata_path), "--config", str(config_path)])

    assert result.exit_code == 0, result.output
    assert "1 of 1 viewers can open the dataset" in result.output


def test_cli_rejects_invalid_config(tmp_path: Path, runner: CliRunner) -> None:
    metadata_path, _ = write_inputs(tmp_path)
    config_path = tmp_path / "config.yaml"
    config_path.write_text("loader:\n  timeout: -1\n", encoding="utf-8")

    result = runner.invoke(app, ["--dataset", str(metadata_path), "--config", str(config_path)])

    assert result.exit_code != 0


def test_cli_rejects_unreadable_dataset(tmp_path: Path, runner: CliRunner) -> None:
    store = tmp_path / "empty.zarr"
    store.mkdir()
    manifest = tmp_path / "vizarr.yaml"
    manifest.write_text(VIEWER_MANIFEST, encoding="utf-8")

    result = runner.invoke(app, ["--dataset", str(store), "--manifest", str(manifest)])

    assert result.exit_code != 0


def test_cli_reports_malformed_store_attributes(tmp_path: Path, runner: CliRunner) -> None:
    store = tmp_path / "image.zarr"
    store.mkdir()
    (store / ".zattrs").write_text(json.dumps({"multiscales": {"version": "0.4"}}), encoding="utf-8")
    manifest = tmp_path / "vizarr.yaml"
    manifest.write_text(VIEWER_MANIFEST, encoding="utf-8")

    result = runner.invoke(app, ["--dataset", str(store), "--manifest", str(manifest)])

    assert result.exit_code == 2
    assert "multiscales" in result.output
