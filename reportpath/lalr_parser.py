#
# Copyright (c), 2018-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
"""
A generic LALR(1) parser: a table generator for context-free grammars and a
shift-reduce driver. The tables are computed from the LR(0) item sets with the
lookahead propagation method (Aho, Sethi, Ullman, "Compilers", §4.7).
"""
from typing import cast, Any, Callable, Dict, FrozenSet, List, \
    MutableMapping, Optional, Set, Tuple, Type, TypeVar

from .exceptions import GrammarError, XPathSyntaxError

__all__ = ['SHIFT', 'REDUCE', 'ACCEPT', 'Production', 'Grammar', 'ParsingTable',
           'LALRParser']

SHIFT = 's'
REDUCE = 'r'
ACCEPT = 'a'

START_SYMBOL = '$accept'
EOF_SYMBOL = 'EOF'
DUMMY_LOOKAHEAD = '#'

ActionType = Optional[Tuple[str, int]]
ItemType = Tuple[int, int]  # (production index, dot position)
ReductionType = Callable[..., Any]


class Production:
    """
    A grammar production with an optional reduction action. The action receives
    the semantic values of the right hand side symbols and returns the value of
    the left hand side symbol. If no action is provided the value of the first
    symbol is passed through.
    """
    __slots__ = ('index', 'lhs', 'rhs', 'action')

    def __init__(self, index: int, lhs: str, rhs: Tuple[str, ...],
                 action: Optional[ReductionType] = None) -> None:
        self.index = index
        self.lhs = lhs
        self.rhs = rhs
        self.action = action

    def __repr__(self) -> str:
        return '%s(%r)' % (self.__class__.__name__, str(self))

    def __str__(self) -> str:
        return '%s : %s' % (self.lhs, ' '.join(self.rhs))

    def __len__(self) -> int:
        return len(self.rhs)


class Grammar:
    """
    A context-free grammar. Productions are written as strings, with the
    left hand side separated by a colon and the symbols separated by spaces,
    e.g. 'AdditiveExpr : AdditiveExpr + MultiplicativeExpr'. Symbols that are
    not the left hand side of any production are terminals.

    :param start: the start symbol.
    """
    def __init__(self, start: str) -> None:
        self.start = start
        self.productions: List[Production] = [Production(0, START_SYMBOL, (start,))]

    def __repr__(self) -> str:
        return '%s(start=%r)' % (self.__class__.__name__, self.start)

    def add(self, rule: str, action: Optional[ReductionType] = None) -> Production:
        lhs, separator, rhs = rule.partition(' : ')
        if not separator or not lhs.strip() or not rhs.split():
            raise GrammarError("invalid production %r" % rule)

        production = Production(len(self.productions), lhs.strip(), tuple(rhs.split()), action)
        self.productions.append(production)
        return production

    @property
    def nonterminals(self) -> List[str]:
        symbols: List[str] = []
        for p in self.productions:
            if p.lhs not in symbols:
                symbols.append(p.lhs)
        return symbols

    @property
    def terminals(self) -> List[str]:
        nonterminals = set(self.nonterminals)
        symbols: List[str] = []
        for p in self.productions:
            for symbol in p.rhs:
                if symbol not in nonterminals and symbol not in symbols:
                    symbols.append(symbol)
        symbols.append(EOF_SYMBOL)
        return symbols


class ParsingTable:
    """
    LALR(1) parsing table built from a grammar.

    :ivar action: a list of rows, one for each state, with a cell for each \
    terminal. A cell is `None` for errors or a couple with the action kind \
    and its argument: the next state for shifts and the production index \
    for reductions.
    :ivar goto: a list of rows, one for each state, with the next state for \
    each nonterminal.
    :ivar conflicts: the resolved conflicts, shift-reduce conflicts are \
    resolved in favor of the shift.
    """
    def __init__(self, grammar: Grammar) -> None:
        self.grammar = grammar
        self.productions = grammar.productions
        self.terminals = grammar.terminals
        self.nonterminals = grammar.nonterminals
        self.terminal_index = {s: k for k, s in enumerate(self.terminals)}
        self.nonterminal_index = {s: k for k, s in enumerate(self.nonterminals)}
        self.symbols = self.nonterminals + self.terminals

        if grammar.start not in self.nonterminal_index:
            raise GrammarError("missing productions for start symbol %r" % grammar.start)

        self.by_lhs: Dict[str, List[int]] = {s: [] for s in self.nonterminals}
        for p in self.productions:
            self.by_lhs[p.lhs].append(p.index)

        self.nullable = self._compute_nullable()
        self.first = self._compute_first()

        self.kernels: List[FrozenSet[ItemType]] = []
        self.transitions: Dict[Tuple[int, str], int] = {}
        self._build_lr0_automaton()

        self.lookaheads = self._compute_lookaheads()
        self.conflicts: List[str] = []
        self.action: List[List[ActionType]] = []
        self.goto: List[List[Optional[int]]] = []
        self._build_tables()

    def __repr__(self) -> str:
        return '%s(states=%d, conflicts=%d)' % (
            self.__class__.__name__, len(self.kernels), len(self.conflicts)
        )

    @property
    def states(self) -> int:
        return len(self.kernels)

    def _compute_nullable(self) -> Set[str]:
        nullable: Set[str] = set()
        changed = True
        while changed:
            changed = False
            for p in self.productions:
                if p.lhs not in nullable and all(s in nullable for s in p.rhs):
                    nullable.add(p.lhs)
                    changed = True
        return nullable

    def _compute_first(self) -> Dict[str, Set[str]]:
        first: Dict[str, Set[str]] = {s: set() for s in self.nonterminals}
        for s in self.terminals:
            first[s] = {s}

        changed = True
        while changed:
            changed = False
            for p in self.productions:
                target = first[p.lhs]
                size = len(target)
                for symbol in p.rhs:
                    target.update(first[symbol])
                    if symbol not in self.nullable:
                        break
                if len(target) != size:
                    changed = True
        return first

    def first_of_sequence(self, symbols: Tuple[str, ...], lookahead: str) -> Set[str]:
        """Returns the FIRST set of a sequence of symbols followed by a lookahead."""
        result: Set[str] = set()
        for symbol in symbols:
            result.update(self.first.get(symbol, (symbol,)))
            if symbol not in self.nullable:
                return result
        result.add(lookahead)
        return result

    def next_symbol(self, item: ItemType) -> Optional[str]:
        rhs = self.productions[item[0]].rhs
        return rhs[item[1]] if item[1] < len(rhs) else None

    ###
    # LR(0) item sets
    def lr0_closure(self, kernel: FrozenSet[ItemType]) -> List[ItemType]:
        items = sorted(kernel)
        seen = set(items)
        for item in items:
            symbol = self.next_symbol(item)
            if symbol in self.by_lhs:
                for index in self.by_lhs[cast(str, symbol)]:
                    if (index, 0) not in seen:
                        seen.add((index, 0))
                        items.append((index, 0))
        return items

    def _build_lr0_automaton(self) -> None:
        state_index: Dict[FrozenSet[ItemType], int] = {}
        start = frozenset([(0, 0)])
        self.kernels.append(start)
        state_index[start] = 0

        k = 0
        while k < len(self.kernels):
            items = self.lr0_closure(self.kernels[k])
            for symbol in self.symbols:
                kernel = frozenset(
                    (p, d + 1) for p, d in items if self.next_symbol((p, d)) == symbol
                )
                if not kernel:
                    continue
                try:
                    target = state_index[kernel]
                except KeyError:
                    target = state_index[kernel] = len(self.kernels)
                    self.kernels.append(kernel)
                self.transitions[(k, symbol)] = target
            k += 1

    ###
    # LALR(1) lookaheads
    def lr1_closure(self, items: MutableMapping[ItemType, Set[str]]) -> Dict[ItemType, Set[str]]:
        """
        Computes the closure of a set of LR(1) items, represented as a map
        from LR(0) items to their lookahead sets.
        """
        closure = {item: set(lookaheads) for item, lookaheads in items.items()}
        worklist = list(closure)
        while worklist:
            item = worklist.pop()
            symbol = self.next_symbol(item)
            if symbol not in self.by_lhs:
                continue

            rest = self.productions[item[0]].rhs[item[1] + 1:]
            new_lookaheads: Set[str] = set()
            for lookahead in closure[item]:
                new_lookaheads.update(self.first_of_sequence(rest, lookahead))

            for index in self.by_lhs[cast(str, symbol)]:
                target = closure.setdefault((index, 0), set())
                if not new_lookaheads.issubset(target):
                    target.update(new_lookaheads)
                    worklist.append((index, 0))
        return closure

    def _compute_lookaheads(self) -> Dict[Tuple[int, ItemType], Set[str]]:
        lookaheads: Dict[Tuple[int, ItemType], Set[str]] = {
            (k, item): set() for k, kernel in enumerate(self.kernels) for item in kernel
        }
        lookaheads[(0, (0, 0))].add(EOF_SYMBOL)
        propagation: Dict[Tuple[int, ItemType], List[Tuple[int, ItemType]]] = {}

        for k, kernel in enumerate(self.kernels):
            for kernel_item in sorted(kernel):
                targets = propagation[(k, kernel_item)] = []
                closure = self.lr1_closure({kernel_item: {DUMMY_LOOKAHEAD}})
                for (p, d), item_lookaheads in closure.items():
                    symbol = self.next_symbol((p, d))
                    if symbol is None:
                        continue

                    target = (self.transitions[(k, symbol)], (p, d + 1))
                    for lookahead in item_lookaheads:
                        if lookahead == DUMMY_LOOKAHEAD:
                            targets.append(target)
                        else:
                            lookaheads[target].add(lookahead)

        changed = True
        while changed:
            changed = False
            for source, targets in propagation.items():
                for target in targets:
                    size = len(lookaheads[target])
                    lookaheads[target].update(lookaheads[source])
                    if len(lookaheads[target]) != size:
                        changed = True
        return lookaheads

    ###
    # Tables
    def _set_action(self, state: int, terminal: str, action: Tuple[str, int]) -> None:
        row = self.action[state]
        column = self.terminal_index[terminal]
        current = row[column]
        if current is None or current == action:
            row[column] = action
            return

        if current[0] == SHIFT and action[0] == REDUCE:
            self.conflicts.append("shift-reduce conflict in state %d on %r: "
                                  "shift preferred to %s" %
                                  (state, terminal, self.productions[action[1]]))
        elif current[0] == REDUCE and action[0] == SHIFT:
            self.conflicts.append("shift-reduce conflict in state %d on %r: "
                                  "shift preferred to %s" %
                                  (state, terminal, self.productions[current[1]]))
            row[column] = action
        else:
            raise GrammarError("reduce-reduce conflict in state %d on %r: %s / %s" % (
                state, terminal, self.productions[current[1]], self.productions[action[1]]
            ))

    def _build_tables(self) -> None:
        for k, kernel in enumerate(self.kernels):
            self.action.append([None] * len(self.terminals))
            self.goto.append([
                self.transitions.get((k, s)) for s in self.nonterminals
            ])

            items = self.lr1_closure({item: self.lookaheads[(k, item)] for item in kernel})
            for (p, d), item_lookaheads in sorted(items.items()):
                symbol = self.next_symbol((p, d))
                if symbol is not None:
                    if symbol in self.terminal_index:
                        self._set_action(k, symbol, (SHIFT, self.transitions[(k, symbol)]))
                elif p == 0:
                    self._set_action(k, EOF_SYMBOL, (ACCEPT, 0))
                else:
                    for lookahead in sorted(item_lookaheads):
                        self._set_action(k, lookahead, (REDUCE, p))

    def expected_terminals(self, state: int) -> List[str]:
        return [s for s, action in zip(self.terminals, self.action[state]) if action is not None]


ParserType = TypeVar('ParserType', bound='LALRParser')


class LALRParser:
    """
    Base class for parsers driven by a LALR(1) table. Subclasses define the
    grammar registering the productions with their reduction actions and
    then call the `build()` class method.

    :cvar grammar: the grammar of the language.
    :cvar table: the parsing table, computed by `build()`.
    """
    grammar: Grammar
    table: Optional[ParsingTable] = None

    @classmethod
    def register(cls, rule: str, action: Optional[ReductionType] = None) -> Production:
        """Registers a production of the grammar."""
        if cls.table is not None:
            raise GrammarError("parser %r is already built" % cls.__name__)
        return cls.grammar.add(rule, action)

    @classmethod
    def reduction(cls, *rules: str) -> Callable[[ReductionType], ReductionType]:
        """A decorator for registering the reduction action of one or more productions."""
        def reduction_decorator(func: ReductionType) -> ReductionType:
            for rule in rules:
                cls.register(rule, func)
            return func
        return reduction_decorator

    @classmethod
    def build(cls: Type[ParserType]) -> None:
        """Builds the parsing table from the registered productions."""
        cls.table = ParsingTable(cls.grammar)

    @staticmethod
    def tokenize(source: str) -> Tuple[List[str], List[str]]:
        raise NotImplementedError()

    def parse(self, source: str) -> Any:
        """
        Parses a source string and returns the semantic value of the start symbol.

        :param source: the string to parse.
        """
        table = self.table
        if table is None:
            raise GrammarError("parser %r is not built" % self.__class__.__name__)

        types, values = self.tokenize(source)
        productions = table.productions
        terminal_index = table.terminal_index
        nonterminal_index = table.nonterminal_index

        states: List[int] = [0]
        symbols: List[str] = []
        stack: List[Any] = []
        pos = 0

        while True:
            state = states[-1]
            token_type = types[pos]
            try:
                action = table.action[state][terminal_index[token_type]]
            except KeyError:
                action = None

            if action is None:
                raise self.parse_error(source, token_type, values[pos], state)

            kind, argument = action
            if kind == SHIFT:
                states.append(argument)
                symbols.append(token_type)
                stack.append(values[pos])
                pos += 1
            elif kind == REDUCE:
                production = productions[argument]
                start = len(stack) - len(production.rhs)
                args = stack[start:]
                del stack[start:]
                del states[start + 1:]
                del symbols[start:]

                if production.action is None:
                    value = args[0] if args else None
                else:
                    value = production.action(*args)

                goto_state = table.goto[states[-1]][nonterminal_index[production.lhs]]
                if goto_state is None:
                    raise self.parse_error(source, token_type, values[pos], states[-1])
                states.append(goto_state)
                symbols.append(production.lhs)
                stack.append(value)
            else:
                return stack[-1]

    def parse_error(self, source: str, token_type: str,
                    value: str, state: int) -> XPathSyntaxError:
        if token_type == EOF_SYMBOL:
            msg = "XPath parse error: unexpected end of expression"
        else:
            msg = "XPath parse error: unexpected %r" % (value or token_type)
        return XPathSyntaxError(msg, source)
