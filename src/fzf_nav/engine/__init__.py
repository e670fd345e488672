"""Ranking queries and the command facade."""

from fzf_nav.engine.facade import COMMANDS, CommandResult, CommandSpec, QueryFacade, parse_limit
from fzf_nav.engine.ranking import RankingEngine

__all__ = [
    "COMMANDS",
    "CommandResult",
    "CommandSpec",
    "QueryFacade",
    "RankingEngine",
    "parse_limit",
]
