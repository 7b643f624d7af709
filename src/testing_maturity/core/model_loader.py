"""Loading and process-wide caching of the maturity model document.

The model is versioned by redeploy, never updated at runtime, so the first
successful load is cached for the remainder of the process. A lock guards
the first load so concurrent first accesses read the source only once.
"""

import json
import threading
from importlib import resources
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError

from testing_maturity.core.maturity_model import MaturityModel
from testing_maturity.observability import get_logger

logger = get_logger(__name__)


class ModelUnavailableError(Exception):
    """Raised when the maturity model cannot be read or fails schema checks."""


class ModelSource(Protocol):
    """Read-only provider of the raw maturity model document."""

    def read(self) -> dict[str, Any]:
        """Return the parsed model document."""
        ...


class JsonFileModelSource:
    """Reads the model document from a JSON file.

    When no path is given the reference model packaged with the service is
    used.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path

    @property
    def description(self) -> str:
        return str(self._path) if self._path is not None else "packaged model.json"

    def read(self) -> dict[str, Any]:
        if self._path is not None:
            content = self._path.read_text(encoding="utf-8")
        else:
            content = (
                resources.files("testing_maturity")
                .joinpath("data", "model.json")
                .read_text(encoding="utf-8")
            )
        document = json.loads(content)
        if not isinstance(document, dict):
            raise ValueError("Model document must be a JSON object")
        return document


class ModelLoader:
    """Read-through, load-once cache around a ModelSource."""

    def __init__(self, source: ModelSource) -> None:
        """Initialise the loader.

        Args:
            source: Provider of the raw model document.
        """
        self._source = source
        self._model: MaturityModel | None = None
        self._lock = threading.Lock()

    def load(self) -> MaturityModel:
        """Return the cached model, loading it on first use.

        Returns:
            The immutable MaturityModel.

        Raises:
            ModelUnavailableError: If the source cannot be read or the document
                does not conform to the model schema. Failures are not cached,
                so a later call retries the source.
        """
        model = self._model
        if model is not None:
            return model

        with self._lock:
            if self._model is None:
                self._model = self._read_model()
            return self._model

    def _read_model(self) -> MaturityModel:
        try:
            document = self._source.read()
        except (OSError, ValueError) as exc:
            logger.error("Maturity model could not be read", error=str(exc))
            raise ModelUnavailableError("Maturity model source could not be read") from exc

        try:
            model = MaturityModel.model_validate(document)
        except ValidationError as exc:
            logger.error(
                "Maturity model failed schema validation",
                error_count=exc.error_count(),
                errors=exc.errors(
                    include_url=False, include_context=False, include_input=False
                ),
            )
            raise ModelUnavailableError("Maturity model does not conform to the schema") from exc

        logger.info(
            "Maturity model loaded",
            model_version=model.version,
            level_count=len(model.maturity_levels),
            dimension_count=len(model.maturity_model),
            question_count=len(model.questionnaire),
        )
        return model
