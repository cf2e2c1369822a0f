import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from .constants import OutputFormat
from .domain.models import SchemaMap, schema_to_dict
from .exceptions import OutputWriteError


logger = logging.getLogger(__name__)


def save_schema(schema: SchemaMap, output_path: Union[str, Path]) -> Path:
    """
    Saves the normalized schema as pretty-printed JSON for debugging.

    Model order and field order are preserved.

    Raises:
        OutputWriteError: If the file cannot be written
    """
    output_path = Path(output_path)
    data: Dict[str, Any] = schema_to_dict(schema)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding=OutputFormat.ENCODING) as f:
            json.dump(data, f, indent=4, ensure_ascii=False)
            f.write("\n")
    except OSError as e:
        raise OutputWriteError(
            f"Failed to save schema to {output_path}: {e}", path=str(output_path)
        ) from e
    logger.info(f"Schema saved to {output_path}")
    return output_path
