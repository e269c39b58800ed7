# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""``$filter`` compilation: column whitelists, condition compiler and emitters."""

from erpodata.data import identifier
from erpodata.data.columns import ColumnDescriptor, ColumnRegistry, SemanticType
from erpodata.data.condition_compiler import ConditionCompiler
from erpodata.data.conditions import (
    ChainLink,
    ComparisonCondition,
    ComparisonOperator,
    CompiledCondition,
    ConditionChain,
    Connector,
    NullCondition,
    StringFunction,
    StringMatchCondition,
)
from erpodata.data.deadline import Deadline
from erpodata.data.filter import FilterCompiler
from erpodata.data.filter_parser import Clause, split_clauses, tokenize
from erpodata.data.page import CollectionPage

__all__ = [
    "ChainLink",
    "Clause",
    "CollectionPage",
    "ColumnDescriptor",
    "ColumnRegistry",
    "ComparisonCondition",
    "ComparisonOperator",
    "CompiledCondition",
    "ConditionChain",
    "ConditionCompiler",
    "Connector",
    "Deadline",
    "FilterCompiler",
    "NullCondition",
    "SemanticType",
    "StringFunction",
    "StringMatchCondition",
    "identifier",
    "split_clauses",
    "tokenize",
]
