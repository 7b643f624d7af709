"""Unit tests for loading and caching the maturity model."""

import json
import threading
import time
from pathlib import Path
from typing import Any

import pytest

from factories import build_model_document
from testing_maturity.core.model_loader import JsonFileModelSource, ModelLoader, ModelUnavailableError


class CountingSource:
    """Model source that counts reads and can be made slow or failing."""

    def __init__(self, document: dict[str, Any] | None = None, delay: float = 0.0) -> None:
        self.document = document if document is not None else build_model_document()
        self.delay = delay
        self.reads = 0
        self.error: Exception | None = None

    def read(self) -> dict[str, Any]:
        self.reads += 1
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.document


class TestModelLoader:
    """Tests for ModelLoader caching and failure handling."""

    def test_load_returns_validated_model(self) -> None:
        loader = ModelLoader(CountingSource())
        model = loader.load()
        assert model.version == "test-1"
        assert len(model.questionnaire) == 10

    def test_load_is_idempotent_and_cached(self) -> None:
        source = CountingSource()
        loader = ModelLoader(source)

        first = loader.load()
        second = loader.load()

        assert first is second
        assert source.reads == 1

    def test_concurrent_first_access_reads_source_once(self) -> None:
        source = CountingSource(delay=0.05)
        loader = ModelLoader(source)
        results: list[Any] = []

        threads = [threading.Thread(target=lambda: results.append(loader.load())) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert source.reads == 1
        assert len(results) == 8
        assert all(result is results[0] for result in results)

    def test_unreadable_source_raises_model_unavailable(self) -> None:
        source = CountingSource()
        source.error = OSError("disk gone")
        with pytest.raises(ModelUnavailableError):
            ModelLoader(source).load()

    def test_schema_violation_raises_model_unavailable(self) -> None:
        document = build_model_document()
        document["maturity_levels"] = document["maturity_levels"][:3]
        with pytest.raises(ModelUnavailableError, match="does not conform"):
            ModelLoader(CountingSource(document)).load()

    def test_failure_is_not_cached(self) -> None:
        source = CountingSource()
        source.error = OSError("temporarily unavailable")
        loader = ModelLoader(source)

        with pytest.raises(ModelUnavailableError):
            loader.load()

        source.error = None
        assert loader.load().version == "test-1"
        assert source.reads == 2


class TestJsonFileModelSource:
    """Tests for reading the model document from JSON."""

    def test_packaged_model_is_used_without_path(self) -> None:
        document = JsonFileModelSource().read()
        assert document["version"] == "v0.4"

    def test_reads_configured_file(self, tmp_path: Path) -> None:
        path = tmp_path / "model.json"
        path.write_text(json.dumps(build_model_document(version="custom")), encoding="utf-8")

        model = ModelLoader(JsonFileModelSource(path)).load()

        assert model.version == "custom"

    def test_missing_file_raises_model_unavailable(self, tmp_path: Path) -> None:
        loader = ModelLoader(JsonFileModelSource(tmp_path / "absent.json"))
        with pytest.raises(ModelUnavailableError, match="could not be read"):
            loader.load()

    def test_malformed_json_raises_model_unavailable(self, tmp_path: Path) -> None:
        path = tmp_path / "model.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ModelUnavailableError):
            ModelLoader(JsonFileModelSource(path)).load()

    def test_non_object_document_raises_model_unavailable(self, tmp_path: Path) -> None:
        path = tmp_path / "model.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        with pytest.raises(ModelUnavailableError):
            ModelLoader(JsonFileModelSource(path)).load()
