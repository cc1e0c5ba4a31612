"""Local design files (JSON in the saved-design element schema)."""

import json
import logging
from pathlib import Path
from typing import Optional, Tuple

from .models import DesignDocument, ElementIdGenerator, document_from_dict, document_to_dict

logger = logging.getLogger(__name__)


def save_design_file(
    path: Path,
    document: DesignDocument,
    name: str,
    template_id: Optional[str] = None
) -> None:
    """Write a design to a local JSON file."""
    data = {"name": name, "templateId": template_id}
    data.update(document_to_dict(document))
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info(f"Design saved to {path}")


def load_design_file(
    path: Path,
    id_generator: Optional[ElementIdGenerator] = None
) -> Tuple[DesignDocument, str, Optional[str]]:
    """
    Read a design JSON file.

    Returns:
        Tuple of (document, name, template_id)

    Raises:
        ValueError: if the file is not valid design JSON
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"{path} is not valid JSON: {e}") from e

    document = document_from_dict(data, id_generator)
    name = data.get("name") or path.stem
    template_id = data.get("templateId")
    return document, name, str(template_id) if template_id else None
