"""Business logic services."""

from .completion import BedrockCompletionClient, get_completion_client
from .statistics import compute_statistics
from .supabase import SupabaseClient, get_supabase_client
from .todo_analyzer import analyze_todos
from .todo_parser import parse_todo
from .todo_store import TodoStore

__all__ = [
    "parse_todo",
    "analyze_todos",
    "compute_statistics",
    "BedrockCompletionClient",
    "get_completion_client",
    "SupabaseClient",
    "get_supabase_client",
    "TodoStore",
]
