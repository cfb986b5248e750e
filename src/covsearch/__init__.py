#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
"""covsearch is a search-based engine that evolves test inputs to maximise coverage."""

import covsearch.configuration as config
import covsearch.generator as gen


__version__ = "0.1.0"

set_configuration = gen.set_configuration
generate = gen.generate
ReturnCode = gen.ReturnCode
SearchResult = gen.SearchResult
Configuration = config.Configuration
Algorithm = config.Algorithm

__all__ = [
    "Algorithm",
    "Configuration",
    "ReturnCode",
    "SearchResult",
    "__version__",
    "generate",
    "set_configuration",
]
