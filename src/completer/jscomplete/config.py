"""
JSCOMPLETE - Configuration Module

Contains: version, logger, analysis constants

Copyright (c) 2026 Provimedia GmbH
Licensed under the Polyform Noncommercial License 1.0.0
See LICENSE file in the project root for full license information.
"""

import logging
import os
from typing import Any, Dict

VERSION = "1.0.0"

# =============================================================================
# Logging
# =============================================================================
LOG_LEVEL = os.environ.get("JSCOMPLETE_LOG_LEVEL", "WARNING").upper()

logger = logging.getLogger("jscomplete")
logger.setLevel(getattr(logging, LOG_LEVEL, logging.WARNING))
logger.addHandler(logging.NullHandler())

# =============================================================================
# Analysis
# =============================================================================
# Options passed to every parse call; the walker needs node locations.
PARSE_OPTIONS: Dict[str, Any] = {"loc": True}

DEFAULT_TYPE_NAME = "Object"
FUNCTION_TYPE_NAME = "Function"
PROTOTYPE_PROPERTY = "prototype"
THIS_SYMBOL = "this"
