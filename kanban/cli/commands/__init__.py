"""
FILE: kanban/cli/commands/__init__.py
PURPOSE: CLI command modules
"""

# Export all command handlers for easy importing
from .system import (
    version,
    wipe,
)
from .users import (
    register,
    login,
    logout,
    whoami,
)
from .boards import (
    board_add,
    board_rm,
    board_join,
    board_ls,
    board_show,
)
from .columns import (
    column_ls,
    column_add,
    column_rename,
    column_mv,
    column_rm,
    column_limit,
    column_unlimit,
    column_tasks,
)
from .tasks import (
    task_add,
    task_advance,
    task_title,
    task_desc,
    task_due,
    task_assign,
    task_mine,
    task_show,
)

__all__ = [
    "version",
    "wipe",
    "register",
    "login",
    "logout",
    "whoami",
    "board_add",
    "board_rm",
    "board_join",
    "board_ls",
    "board_show",
    "column_ls",
    "column_add",
    "column_rename",
    "column_mv",
    "column_rm",
    "column_limit",
    "column_unlimit",
    "column_tasks",
    "task_add",
    "task_advance",
    "task_title",
    "task_desc",
    "task_due",
    "task_assign",
    "task_mine",
    "task_show",
]
