"""Tests for the operator CLI."""

import json
from pathlib import Path

import pytest

from memory_calendar.cli import build_parser, main
from memory_calendar.containers import AppContainer
from tests.conftest import BUCKET, REGION, InMemoryObjectStorage, jpeg_with_exif

INDEX_KEY = "processed/date-media-index.json"


def _url(key: str) -> str:
    return f"https://{BUCKET}.s3.{REGION}.amazonaws.com/{key}"


def test_parser_requires_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_build_index(container: AppContainer, storage: InMemoryObjectStorage) -> None:
    storage.add("processed/a.jpg", jpeg_with_exif(original="2024:02:14 09:00:00"))

    exit_code = main(["--verbose", "build-index"], container=container)

    assert exit_code == 0
    assert json.loads(storage.objects[INDEX_KEY]) == {
        "2024-02-14": [_url("processed/a.jpg")]
    }


def test_build_index_dry_run(
    container: AppContainer, storage: InMemoryObjectStorage
) -> None:
    storage.add("processed/a.jpg", jpeg_with_exif(original="2024:02:14 09:00:00"))

    assert main(["build-index", "--dry-run"], container=container) == 0
    assert INDEX_KEY not in storage.objects


def test_prune_index(container: AppContainer, storage: InMemoryObjectStorage) -> None:
    storage.add("processed/a.jpg", b"x")
    storage.add(
        INDEX_KEY,
        json.dumps(
            {"2024-02-14": [_url("processed/a.jpg"), _url("processed/gone.jpg")]}
        ).encode("utf-8"),
    )

    assert main(["prune-index"], container=container) == 0
    assert json.loads(storage.objects[INDEX_KEY]) == {
        "2024-02-14": [_url("processed/a.jpg")]
    }


def test_prune_without_index_fails(container: AppContainer) -> None:
    assert main(["prune-index"], container=container) == 1


def test_delete_live_photos(
    container: AppContainer, storage: InMemoryObjectStorage
) -> None:
    storage.add("trip/IMG_1.jpg")
    storage.add("trip/IMG_1.mov")
    storage.add("home/IMG_2.jpg")
    storage.add("home/IMG_2.mov")

    assert main(["delete-live-photos", "--prefix", "trip/"], container=container) == 0
    assert "trip/IMG_1.mov" not in storage.objects
    assert "home/IMG_2.mov" in storage.objects


def test_delete_live_photos_dry_run_uses_source_prefix(
    container: AppContainer, storage: InMemoryObjectStorage
) -> None:
    container.settings.s3_source_prefix = "trip/"
    storage.add("trip/IMG_1.jpg")
    storage.add("trip/IMG_1.mov")

    assert main(["delete-live-photos", "--dry-run"], container=container) == 0
    assert "trip/IMG_1.mov" in storage.objects


def test_delete_live_photos_reports_failures(
    container: AppContainer, storage: InMemoryObjectStorage
) -> None:
    storage.add("IMG_1.jpg")
    storage.add("IMG_1.mov")
    storage.delete_errors["IMG_1.mov"] = "AccessDenied"

    assert main(["delete-live-photos"], container=container) == 1


def test_requires_bucket(container: AppContainer) -> None:
    container.settings.s3_bucket_name = ""

    assert main(["build-index"], container=container) == 1


def test_runs_without_supabase_settings(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.chdir(tmp_path)
    for name in ("SUPABASE_URL", "SUPABASE_SERVICE_KEY", "S3_BUCKET_NAME"):
        monkeypatch.delenv(name, raising=False)

    assert main(["build-index", "--dry-run"]) == 1
