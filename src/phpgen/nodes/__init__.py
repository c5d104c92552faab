"""Input tree for the phpgen compiler.

The tree is produced by an upstream parser and type checker. Every node is
an immutable dataclass carrying its source position; kinds are closed
unions so the compiler's dispatch tables can be checked for completeness.

Categories:
- expressions: Const, Name, Getattr, BinOp, FuncCall, ...
- output: Data, Output, Directive, Css
- control_flow: If, Switch, ForRange, Foreach
- variables: LetValue, LetContent
- calls: CallBasic, CallDelegate and their params
- messages: Msg, MsgFallbackGroup and message parts
- structure: Template, TemplateFile, TemplateParam
- types: ContentKind and parameter types

"""

from __future__ import annotations

from phpgen.nodes.base import Node
from phpgen.nodes.calls import (
    AnyCall,
    CallBasic,
    CallDelegate,
    CallParam,
    CallParamContent,
    CallParamValue,
    DataMode,
)
from phpgen.nodes.control_flow import Foreach, ForRange, If, Switch, SwitchCase
from phpgen.nodes.expressions import (
    AnyExpr,
    BinOp,
    BoolOp,
    Const,
    CondExpr,
    DataAccess,
    Dict,
    Expr,
    FuncCall,
    Getattr,
    Getitem,
    Global,
    List,
    Name,
    NullCoalesce,
    OptionalGetattr,
    OptionalGetitem,
    UnaryOp,
)
from phpgen.nodes.messages import (
    Msg,
    MsgFallbackGroup,
    MsgHtmlTag,
    MsgPart,
    MsgPlaceholder,
    MsgPlural,
    MsgPluralCase,
    MsgSelect,
    MsgSelectCase,
    MsgText,
)
from phpgen.nodes.output import Css, Data, Directive, Output
from phpgen.nodes.structure import DelegateInfo, Template, TemplateFile, TemplateParam
from phpgen.nodes.types import AnyType, ContentKind, PrimitiveType, SanitizedType, UnionType
from phpgen.nodes.variables import LetContent, LetValue

# Nodes that may appear in a template body.
AnyNode = (
    Data
    | Output
    | Css
    | If
    | Switch
    | ForRange
    | Foreach
    | LetValue
    | LetContent
    | CallBasic
    | CallDelegate
    | MsgFallbackGroup
)

__all__ = [
    "AnyCall",
    "AnyExpr",
    "AnyNode",
    "AnyType",
    "BinOp",
    "BoolOp",
    "CallBasic",
    "CallDelegate",
    "CallParam",
    "CallParamContent",
    "CallParamValue",
    "CondExpr",
    "Const",
    "ContentKind",
    "Css",
    "Data",
    "DataAccess",
    "DataMode",
    "DelegateInfo",
    "Dict",
    "Directive",
    "Expr",
    "ForRange",
    "Foreach",
    "FuncCall",
    "Getattr",
    "Getitem",
    "Global",
    "If",
    "LetContent",
    "LetValue",
    "List",
    "Msg",
    "MsgFallbackGroup",
    "MsgHtmlTag",
    "MsgPart",
    "MsgPlaceholder",
    "MsgPlural",
    "MsgPluralCase",
    "MsgSelect",
    "MsgSelectCase",
    "MsgText",
    "Name",
    "Node",
    "NullCoalesce",
    "OptionalGetattr",
    "OptionalGetitem",
    "Output",
    "PrimitiveType",
    "SanitizedType",
    "Switch",
    "SwitchCase",
    "Template",
    "TemplateFile",
    "TemplateParam",
    "UnaryOp",
    "UnionType",
]
