"""
pyclj - Clojure-style collection functions for plain Python containers

The functions work directly on the containers Python already has:
OrderedDict, list, dict, set, plus a front-growing List and a
restartable LazySeq. Every structural operation comes in a copying
form (assoc) and a mutating form (assoc_bang).

Submodules:
- types: Core type definitions (Category, List, Reduced, Atom, errors)
- core: Collection functions (first, map, assoc, conj, reduce, etc.)
- json: JSON encoding and printing (dumps, pr_str, prn, etc.)
- string: String functions (join, split, re_seq, etc.)
- config: Runtime settings (repr and print lengths)
"""

import logging

from pyclj.config import RuntimeConfig, get_config, set_config

# Re-export core functions
from pyclj.core import (
    LazySeq,
    apply,
    assoc,
    assoc_bang,
    assoc_in,
    assoc_in_bang,
    atom,
    butlast,
    classify,
    clj_filter,
    clj_list,
    clj_map,
    clj_max,
    clj_min,
    clj_range,
    clj_set,
    coll_q,
    comp,
    complement,
    concat,
    conj,
    conj_bang,
    cons,
    constantly,
    contains_q,
    count,
    cycle,
    dec,
    dedupe,
    deref,
    disj,
    disj_bang,
    dissoc,
    dissoc_bang,
    distinct,
    distinct_q,
    divide,
    doall,
    dorun,
    drop,
    drop_last,
    drop_while,
    empty,
    empty_of_category,
    empty_q,
    equals,
    even_q,
    every_pred,
    every_q,
    false_q,
    ffirst,
    filterv,
    first,
    flatten,
    fnil,
    frequencies,
    get,
    get_in,
    group_by,
    gt,
    identity,
    inc,
    interleave,
    interpose,
    into,
    iterate,
    keep,
    keep_indexed,
    keys,
    last,
    lazy,
    lazy_seq,
    lazy_seq_q,
    list_q,
    lt,
    map_indexed,
    map_q,
    mapcat,
    mapv,
    merge,
    minus,
    mod,
    multiply,
    neg_q,
    nil_q,
    not_,
    not_any_q,
    not_equals,
    not_every_q,
    nth,
    odd_q,
    operation_dispatch,
    partial,
    partition,
    partition_all,
    plus,
    pos_q,
    quot,
    record_q,
    reduce,
    reduced,
    reduced_q,
    reductions,
    register_operation,
    remove,
    repeat,
    repeatedly,
    replace,
    reset_bang,
    rest,
    reverse,
    second,
    select_keys,
    seq,
    seqable_q,
    set_q,
    shuffle,
    some,
    some_q,
    sort,
    sort_by,
    split_at,
    split_with,
    subvec,
    supported_categories,
    supports_operation,
    swap_bang,
    take,
    take_nth,
    take_while,
    to_iterable,
    true_q,
    update,
    update_bang,
    update_in,
    vals,
    vec,
    vector,
    vector_q,
    zero_q,
    zipmap,
)
from pyclj.json import clj_str, pr_str, println, prn
from pyclj.types import Atom, Category, IllegalArgumentError, List, Reduced

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Types
    "Atom",
    "Category",
    "IllegalArgumentError",
    "LazySeq",
    "List",
    "Reduced",
    # Config
    "RuntimeConfig",
    "get_config",
    "set_config",
    # Categories and dispatch
    "classify",
    "coll_q",
    "empty",
    "empty_of_category",
    "lazy_seq_q",
    "list_q",
    "map_q",
    "operation_dispatch",
    "record_q",
    "register_operation",
    "set_q",
    "supported_categories",
    "supports_operation",
    "vector_q",
    # Iteration
    "lazy",
    "lazy_seq",
    "seq",
    "seqable_q",
    "to_iterable",
    # Sequences
    "butlast",
    "clj_filter",
    "clj_map",
    "clj_range",
    "concat",
    "cons",
    "count",
    "cycle",
    "dedupe",
    "distinct",
    "drop",
    "drop_last",
    "drop_while",
    "ffirst",
    "first",
    "flatten",
    "interleave",
    "interpose",
    "iterate",
    "keep",
    "keep_indexed",
    "last",
    "map_indexed",
    "mapcat",
    "nth",
    "partition",
    "partition_all",
    "remove",
    "repeat",
    "repeatedly",
    "rest",
    "second",
    "take",
    "take_nth",
    "take_while",
    # Structural operations
    "assoc",
    "assoc_bang",
    "assoc_in",
    "assoc_in_bang",
    "conj",
    "conj_bang",
    "contains_q",
    "disj",
    "disj_bang",
    "dissoc",
    "dissoc_bang",
    "get",
    "get_in",
    "select_keys",
    "update",
    "update_bang",
    "update_in",
    # Equality
    "equals",
    "not_equals",
    # Reducers
    "every_q",
    "not_any_q",
    "not_every_q",
    "reduce",
    "reduced",
    "reduced_q",
    "reductions",
    "some",
    # Collection utilities
    "clj_list",
    "clj_set",
    "distinct_q",
    "doall",
    "dorun",
    "empty_q",
    "filterv",
    "frequencies",
    "group_by",
    "into",
    "keys",
    "mapv",
    "merge",
    "replace",
    "reverse",
    "shuffle",
    "sort",
    "sort_by",
    "split_at",
    "split_with",
    "subvec",
    "vals",
    "vec",
    "vector",
    "zipmap",
    # Atoms
    "atom",
    "deref",
    "reset_bang",
    "swap_bang",
    # Functions
    "apply",
    "comp",
    "complement",
    "constantly",
    "every_pred",
    "fnil",
    "identity",
    "partial",
    # Math and predicates
    "clj_max",
    "clj_min",
    "dec",
    "divide",
    "even_q",
    "false_q",
    "gt",
    "inc",
    "lt",
    "minus",
    "mod",
    "multiply",
    "neg_q",
    "nil_q",
    "not_",
    "odd_q",
    "plus",
    "pos_q",
    "quot",
    "some_q",
    "true_q",
    "zero_q",
    # Printing
    "clj_str",
    "pr_str",
    "println",
    "prn",
]
