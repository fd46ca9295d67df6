# Streams and diagnostics
from .Stream import SourcePos, SequenceStream, CharStream
from .Log import MessageType, Message, ParseLog

# Core
from .Parsec import Parsec, Ok
from .Prim import (
    run_parser, empty, pure, fail, token, lazy, fix,
    and_, or_, left, right, mid, compose, map, map_option, map_result, bind,
    many, some, many1, skip_many, optional
)

# Characters
from .Char import (
    satisfy, char, string, literal, regex, one_of, none_of, any_char,
    digit, letter, alpha_num, upper, lower,
    space, spaces, newline, tab, trim
)

# Combinators
from .Combinators import (
    choice, count, between, option, sep_by, sep_by1, end_by, end_by1,
    sep_end_by, sep_end_by1, chainl, chainl1, chainr, chainr1,
    look_ahead, not_followed_by, eof, any_token, many_till,
    label, info, warn, error, recover, inspect,
    parser_trace, parser_traced
)
