"""Timeline documents: plain dicts and JSON with camelCase keys."""

import json
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..core.errors import SerializationError
from .layers import Layer

LAYERS_KEY = "layers"
OPTIONS_KEY = "globalOptions"


def timeline_to_dict(timeline) -> Dict[str, Any]:
    """
    Convert a timeline to a plain document.

    Only stored state is written; derived values such as the duration are
    recomputed after loading.

    Args:
        timeline: Timeline to convert

    Returns:
        ``{"layers": [...], "globalOptions": {...}}``
    """
    options = timeline.global_options
    document_options = options.model_dump(mode="json", by_alias=True, exclude_none=True)
    if options.encoder is not None:
        # Encoder fields default to non-None values, so nulls must be kept
        document_options["encoder"] = options.encoder.model_dump(mode="json", by_alias=True)

    return {
        LAYERS_KEY: [
            layer.model_dump(mode="json", by_alias=True, exclude_none=True)
            for layer in timeline.layers
        ],
        OPTIONS_KEY: document_options,
    }


def timeline_from_dict(document: Dict[str, Any]):
    """
    Rebuild a timeline from a document produced by ``timeline_to_dict``.

    Unknown fields are ignored so newer documents still load.

    Args:
        document: Timeline document

    Returns:
        Equivalent Timeline

    Raises:
        SerializationError: If the document has the wrong shape
    """
    from .timeline import GlobalOptions, Timeline

    if not isinstance(document, dict):
        raise SerializationError(
            f"Timeline document must be an object, got {type(document).__name__}"
        )

    raw_layers = document.get(LAYERS_KEY, [])
    if not isinstance(raw_layers, list):
        raise SerializationError(f"'{LAYERS_KEY}' must be a list")
    raw_options = document.get(OPTIONS_KEY) or {}
    if not isinstance(raw_options, dict):
        raise SerializationError(f"'{OPTIONS_KEY}' must be an object")

    layers: List[Layer] = []
    for index, raw in enumerate(raw_layers):
        try:
            layers.append(Layer.model_validate(raw))
        except ValidationError as e:
            raise SerializationError(f"Invalid layer {index}: {e}") from e

    try:
        options = GlobalOptions.model_validate(raw_options)
    except ValidationError as e:
        raise SerializationError(f"Invalid global options: {e}") from e

    return Timeline(layers, options)


def timeline_to_json(timeline, indent: Optional[int] = None) -> str:
    return json.dumps(timeline_to_dict(timeline), indent=indent)


def timeline_from_json(text: str):
    """Parse a JSON timeline document."""
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise SerializationError(f"Invalid timeline JSON: {e}") from e
    return timeline_from_dict(document)
