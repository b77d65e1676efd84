# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Package authz implements the declarative comparison-check engine.

  - path:      compiles field-path expressions and walks request contexts
  - operators: comparison semantics of the operator enumeration
  - authz:     check compilation and per-request decisions
"""

from .types import (
    OperatorKind,
    CheckSpec,
    CompiledCheck,
    Decision,
    Effect
)

from .path import (
    CompiledPath,
    PathStep,
    compile_path,
    walk
)

from .authz import (
    CheckEvaluator,
    authorize,
    compile_check,
    compile_checks
)

__all__ = [
    # Types
    'OperatorKind',
    'CheckSpec',
    'CompiledCheck',
    'Decision',
    'Effect',

    # Paths
    'CompiledPath',
    'PathStep',
    'compile_path',
    'walk',

    # Evaluation
    'CheckEvaluator',
    'authorize',
    'compile_check',
    'compile_checks'
]
