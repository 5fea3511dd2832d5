# src/lifeplan/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import date, timedelta
from typing import cast

from ..core.state import AppState
from ..tasks import analytics
from ..tasks.board import Bucket, bucket_tasks, instance_id, move_item
from ..tasks.filters import ViewPreferences, filter_tasks
from ..tasks.task_api import (
    add_focus_minutes,
    duplicate_task,
    move_to_next_day,
    move_to_next_week,
    new_task,
)
from ..tasks.task_models import Priority, Task, TaskType
from ..tasks.timeframes import (
    WEEKDAYS,
    format_date,
    parse_date,
    surrounding_time_frame_keys,
    time_frame_key_for,
)

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

GOAL_PREFIXES: dict[str, TaskType] = {
    "w": TaskType.WEEKLY,
    "m": TaskType.MONTHLY,
    "y": TaskType.YEARLY,
    "l": TaskType.LIFE,
}


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        Bad user input (ValueError) becomes an error reply.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except ValueError as e:
            logger.debug("Command /%s rejected: %s", name, e)
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- parsing helpers ----


def _parse_day(state: AppState, raw: str) -> str:
    """Accept YYYY-MM-DD, "today", "tomorrow", "+N" / "-N" (relative to the viewed day)."""
    low = raw.lower()
    if low == "today":
        return format_date(date.today())
    if low == "tomorrow":
        return format_date(state.today() + timedelta(days=1))
    if low == "yesterday":
        return format_date(state.today() - timedelta(days=1))
    if low[:1] in "+-" and low[1:].isdigit():
        return format_date(state.today() + timedelta(days=int(low)))
    return format_date(parse_date(raw))


def _parse_weekdays(raw: str) -> list[str]:
    low = raw.lower()
    if low in ("daily", "all"):
        return list(WEEKDAYS)
    if low == "weekdays":
        return list(WEEKDAYS[:5])
    out: list[str] = []
    for part in low.split(","):
        part = part.strip()
        if not part:
            continue
        match = [d for d in WEEKDAYS if d.lower().startswith(part)]
        if len(match) != 1 or len(part) < 2:
            raise ValueError(f"unknown weekday: {part!r}")
        out.append(match[0])
    return out


def _parse_goal_type(raw: str) -> TaskType:
    low = raw.lower()
    if low in GOAL_PREFIXES:
        return GOAL_PREFIXES[low]
    tt = TaskType(low)
    if not tt.is_goal:
        raise ValueError(f"not a goal type: {raw!r}")
    return tt


def _parse_bucket(state: AppState, raw: str) -> str:
    """Bucket id from user input: a day expression, a goal type, or "<type>:<key>"."""
    if ":" in raw:
        return Bucket.parse(raw).bucket_id
    low = raw.lower()
    if low in GOAL_PREFIXES or low in {t.value for t in TaskType if t.is_goal}:
        tt = _parse_goal_type(low)
        return f"{tt.value}:{time_frame_key_for(tt, state.today())}"
    return _parse_day(state, raw)


def _split_options(args: list[str]) -> tuple[str, dict[str, object]]:
    """
    Split "/add" style arguments into the name and options.

    Tokens: @<day>, !<priority>, #<tag>, every:<days>, key:<time-frame key>, repeat.
    """
    words: list[str] = []
    opts: dict[str, object] = {"tags": []}
    for tok in args:
        if tok.startswith("@") and len(tok) > 1:
            opts["day"] = tok[1:]
        elif tok.startswith("!") and len(tok) > 1:
            opts["priority"] = Priority(tok[1:].lower())
        elif tok.startswith("#") and len(tok) > 1:
            cast(list, opts["tags"]).append(tok[1:])
        elif tok.lower().startswith("every:"):
            opts["every"] = _parse_weekdays(tok[6:])
        elif tok.lower().startswith("key:"):
            opts["key"] = tok[4:]
        elif tok.lower() == "repeat":
            opts["repeat"] = True
        else:
            words.append(tok)
    return " ".join(words).strip(), opts


# ---- views ----


def _viewed_day(state: AppState) -> str:
    return format_date(state.today())


def _visible(state: AppState, bucket: Bucket) -> list[Task]:
    return filter_tasks(bucket_tasks(state.task_store, bucket), bucket.key, state.preferences)


def _render(state: AppState, bucket: Bucket, title: str) -> str:
    items = _visible(state, bucket)
    lines = [title]
    if not items:
        lines.append("  (nothing here)")
    for i, t in enumerate(items, start=1):
        mark = "x" if t.is_completed_on(bucket.key) else " "
        extras = [t.priority.value]
        if t.is_recurring:
            extras.append("repeats")
        if t.focus_minutes:
            extras.append(f"{t.focus_minutes} min")
        tags = "".join(f" #{tag}" for tag in t.tags)
        lines.append(f"  {i}. [{mark}] {t.name} ({', '.join(extras)}){tags}  <{instance_id(t, bucket.key)}>")
    return "\n".join(lines)


def _render_day(state: AppState, day: str) -> str:
    return _render(state, Bucket(TaskType.DAILY, day), f"{parse_date(day).strftime('%A')} {day}:")


def _goal_bucket(state: AppState, tt: TaskType) -> Bucket:
    key = time_frame_key_for(tt, state.today())
    assert key is not None
    return Bucket(tt, key)


def _resolve_ref(state: AppState, ref: str) -> tuple[Task, Bucket] | None:
    """
    Item references used by the commands:
    - "3"   -> 3rd item of the viewed day
    - "w2"  -> 2nd goal of the current week (m/y/l for month/year/life)
    - anything else is taken as a record id
    """
    low = ref.lower()
    bucket: Bucket | None = None
    index: int | None = None
    if low.isdigit():
        bucket, index = Bucket(TaskType.DAILY, _viewed_day(state)), int(low)
    elif low[:1] in GOAL_PREFIXES and low[1:].isdigit():
        bucket, index = _goal_bucket(state, GOAL_PREFIXES[low[0]]), int(low[1:])

    if bucket is not None and index is not None:
        items = _visible(state, bucket)
        if not 1 <= index <= len(items):
            return None
        return items[index - 1], bucket

    task = state.task_store.get_task(ref.split(":", 1)[0])
    if task is None:
        return None
    if task.type is TaskType.DAILY:
        # One-off tasks live on their due date; repeating ones on the viewed day.
        day = task.due_date if task.due_date and not task.is_recurring else _viewed_day(state)
        return task, Bucket(TaskType.DAILY, day)
    return task, Bucket(task.type, task.time_frame_key or _goal_bucket(state, task.type).key)


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_day(state: AppState, args: list[str]) -> str:
    """
    /day           -> show the viewed day
    /day <when>    -> switch to a day (YYYY-MM-DD, today, tomorrow, +N, -N)
    """
    if args:
        state.current_date = parse_date(_parse_day(state, args[0]))
    return _render_day(state, _viewed_day(state))


def cmd_add(state: AppState, args: list[str]) -> str:
    name, opts = _split_options(args)
    if not name:
        return "Usage: /add <name> [@day] [!priority] [#tag] [every:mon,wed]"
    day = _parse_day(state, str(opts["day"])) if "day" in opts else _viewed_day(state)
    task = new_task(
        name,
        due_date=day,
        priority=cast(Priority, opts.get("priority", Priority.LOW)),
        tags=cast(list, opts["tags"]),
        repeated_days=cast(list, opts.get("every", [])),
    )
    stored = state.task_store.add_task(task)
    return f"Added '{stored.name}' on {day} at position {stored.position}."


def cmd_goal(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /goal <weekly|monthly|yearly|life> <name> [key:<time frame>] [repeat] [!priority] [#tag]"
    tt = _parse_goal_type(args[0])
    name, opts = _split_options(args[1:])
    if not name:
        return "Goal name is required."
    key = str(opts.get("key") or _goal_bucket(state, tt).key)
    goal = new_task(
        name,
        task_type=tt,
        time_frame_key=key,
        priority=cast(Priority, opts.get("priority", Priority.LOW)),
        tags=cast(list, opts["tags"]),
        recurring_goal=bool(opts.get("repeat")),
    )
    stored = state.task_store.add_task(goal)
    return f"Added {tt.value} goal '{stored.name}' for {key}."


def cmd_goals(state: AppState, args: list[str]) -> str:
    """
    /goals                 -> current week, month, year and life goals
    /goals <type>          -> previous, current and next three periods
    /goals <type> <key>    -> one time frame
    """
    if args:
        tt = _parse_goal_type(args[0])
        if len(args) > 1:
            bucket = Bucket.parse(f"{tt.value}:{args[1]}")
            return _render(state, bucket, f"{tt.value.capitalize()} goals {bucket.key}:")
        return "\n".join(
            _render(state, Bucket(tt, key), f"{tt.value.capitalize()} goals {key}:")
            for key in surrounding_time_frame_keys(tt, state.today())
        )
    blocks = []
    for tt in (TaskType.WEEKLY, TaskType.MONTHLY, TaskType.YEARLY, TaskType.LIFE):
        bucket = _goal_bucket(state, tt)
        blocks.append(_render(state, bucket, f"{tt.value.capitalize()} goals {bucket.key}:"))
    return "\n".join(blocks)


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <ref>  (3 = 3rd task of the day, w1 = 1st weekly goal, or an id)"
    found = _resolve_ref(state, args[0])
    if found is None:
        return f"No such item: {args[0]}"
    task, bucket = found
    state.task_store.toggle_complete(task.id, bucket.key)
    done = state.task_store.is_task_completed_on_date(task.id, bucket.key)
    return f"'{task.name}' marked {'done' if done else 'not done'} for {bucket.key}."


def cmd_delete(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /del <ref>"
    found = _resolve_ref(state, args[0])
    if found is None:
        return f"No such item: {args[0]}"
    task, _ = found
    if task.is_recurring and emit:
        with contextlib.suppress(Exception):
            emit(f"'{task.name}' repeats; its history on every day is removed too.")
    state.task_store.delete_task(task.id)
    return f"Deleted '{task.name}'."


def cmd_move(state: AppState, args: list[str]) -> str:
    """
    /move <ref> <bucket> [position]

    bucket: a day (YYYY-MM-DD, tomorrow, +N), a goal type (current period)
    or "<type>:<key>". Repeating items are copied, not moved.
    """
    if len(args) < 2:
        return "Usage: /move <ref> <day|type|type:key> [position]"
    found = _resolve_ref(state, args[0])
    if found is None:
        return f"No such item: {args[0]}"
    task, source = found
    dest_id = _parse_bucket(state, args[1])
    index = int(args[2]) - 1 if len(args) > 2 else 10**6

    moved = move_item(
        state.task_store,
        instance_id(task, source.key),
        source.bucket_id,
        dest_id,
        index,
        duplicate_when_dragging=bool(getattr(state.settings, "duplicate_when_dragging", False)),
    )
    if moved is None:
        return f"No such item: {args[0]}"
    verb = "Copied" if moved.id != task.id else "Moved"
    return f"{verb} '{task.name}' to {dest_id}."


def cmd_focus(state: AppState, args: list[str]) -> str:
    if len(args) < 2 or not args[1].isdigit():
        return "Usage: /focus <ref> <minutes>"
    found = _resolve_ref(state, args[0])
    if found is None:
        return f"No such item: {args[0]}"
    task, _ = found
    total = add_focus_minutes(state.task_store, task.id, int(args[1]))
    if total is None:
        return "Nothing recorded."
    return f"'{task.name}': {total} focused minutes in total."


def cmd_dup(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /dup <ref>"
    found = _resolve_ref(state, args[0])
    if found is None:
        return f"No such item: {args[0]}"
    copy = duplicate_task(state.task_store, found[0].id)
    if copy is None:
        return f"No such item: {args[0]}"
    return f"Duplicated '{copy.name}' at position {copy.position}."


def cmd_later(state: AppState, args: list[str]) -> str:
    """
    /later <ref>        -> push a dated task to the next day
    /later <ref> week   -> push it by a week
    """
    if not args:
        return "Usage: /later <ref> [week]"
    found = _resolve_ref(state, args[0])
    if found is None:
        return f"No such item: {args[0]}"
    task, _ = found
    week = len(args) > 1 and args[1].lower() == "week"
    ok = (move_to_next_week if week else move_to_next_day)(state.task_store, task.id)
    if not ok:
        return f"'{task.name}' has no due date to move."
    return f"'{task.name}' now due {state.task_store.get_task(task.id).due_date}."


def cmd_stats(state: AppState, args: list[str]) -> str:
    store = state.task_store
    tasks = store.list_tasks()
    today = state.today()
    day = format_date(today)
    rate = analytics.completion_rate(store, day)
    longest = analytics.longest_streak(store, today)
    goals = analytics.goal_stats(tasks)
    session = int(getattr(state.settings, "focus_session_minutes", 25))
    earned = [
        a.title
        for a in analytics.achievements(
            longest=longest,
            goals_completed=goals.completed,
            sessions=analytics.focus_sessions(tasks, session),
        )
        if a.achieved
    ]
    habit_lines = [f"{t.name} ({analytics.habit_streak(t)}d)" for t in analytics.habits(tasks)[:5]]
    top_tags = [
        f"{s.tag} {s.productivity}%"
        for s in analytics.tag_stats(tasks, state.tag_store.tags, limit=3)
        if s.usage
    ]
    weekdays = [s for s in analytics.completion_by_weekday(tasks) if s.total]
    best = max(weekdays, key=lambda s: s.rate).name if weekdays else "-"
    by_priority = [
        f"{s.name} {s.completed}/{s.total}" for s in analytics.completion_by_priority(tasks) if s.total
    ]
    return (
        "Stats:\n"
        f"  {day}: {rate.completed}/{rate.total} done, {rate.rate:.0f}% of points\n"
        f"  Current streak: {analytics.current_streak(store, today)} days (longest {longest})\n"
        f"  Completed occurrences: {analytics.total_completed(tasks)}\n"
        f"  Focused: {analytics.total_focus_minutes(tasks) / 60:.1f} h\n"
        f"  Goals: {goals.completed}/{goals.total} ({goals.rate:.0f}%)\n"
        f"  Habits: {', '.join(habit_lines) or '-'}\n"
        f"  Tags: {', '.join(top_tags) or '-'}  Best weekday: {best}\n"
        f"  By priority: {', '.join(by_priority) or '-'}\n"
        f"  Achievements: {', '.join(earned) if earned else 'none yet'}"
    )


def cmd_tags(state: AppState, args: list[str]) -> str:
    """
    /tags                  -> list
    /tags add <tag>
    /tags del <tag>
    /tags rename <old> <new>
    /tags reset
    """
    tags = state.tag_store
    sub = args[0].lower() if args else ""
    if sub == "add" and len(args) > 1:
        tags.add_tag(args[1])
    elif sub == "del" and len(args) > 1:
        tags.delete_tag(args[1])
    elif sub == "rename" and len(args) > 2:
        tags.update_tag(args[1], args[2])
    elif sub == "reset":
        tags.reset_to_defaults()
    elif sub:
        return "Usage: /tags [add <tag> | del <tag> | rename <old> <new> | reset]"
    return "Tags: " + (", ".join(tags.tags) or "(none)")


def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter completed on|off
    /filter habits on|off
    /filter tag <tag>|off
    /filter priority low|medium|high|off
    /filter reset
    """
    p = state.preferences
    if not args:
        pass
    elif args[0] == "reset":
        p = ViewPreferences()
    elif len(args) < 2:
        return "Usage: /filter completed|habits on|off, /filter tag <tag>|off, /filter priority <p>|off, /filter reset"
    elif args[0] in ("completed", "habits"):
        on = args[1].lower() in ("on", "1", "true", "yes")
        p = replace(p, **{f"show_{args[0]}": on})
    elif args[0] == "tag":
        p = replace(p, selected_tags=() if args[1] == "off" else (*p.selected_tags, args[1]))
    elif args[0] == "priority":
        p = replace(p, selected_priority=None if args[1] == "off" else Priority(args[1].lower()))
    else:
        return f"Unknown filter: {args[0]}"
    state.preferences = p
    return (
        "Filters: "
        f"completed={'on' if p.show_completed else 'off'}, "
        f"habits={'on' if p.show_habits else 'off'}, "
        f"tags={','.join(p.selected_tags) or '-'}, "
        f"priority={p.selected_priority.value if p.selected_priority else '-'}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("day", cmd_day, help_text="Show a day: /day [YYYY-MM-DD|today|+N|-N].", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <name> [@day] [!high] [#tag] [every:mon,wed].")
registry.register("goal", cmd_goal, help_text="Add a goal: /goal <type> <name> [key:...] [repeat].")
registry.register("goals", cmd_goals, help_text="Show goals: /goals [type] [key].")
registry.register("done", cmd_done, help_text="Toggle completion: /done <ref>.")
registry.register("del", cmd_delete, help_text="Delete: /del <ref>.", aliases=["rm"])
registry.register("move", cmd_move, help_text="Move: /move <ref> <day|type|type:key> [position].", aliases=["mv"])
registry.register("focus", cmd_focus, help_text="Log focused minutes: /focus <ref> <minutes>.")
registry.register("dup", cmd_dup, help_text="Duplicate: /dup <ref>.")
registry.register("later", cmd_later, help_text="Postpone a task: /later <ref> [week].")
registry.register("stats", cmd_stats, help_text="Progress: completion, streaks, achievements.")
registry.register("tags", cmd_tags, help_text="Tag list: /tags [add|del|rename|reset].")
registry.register("filter", cmd_filter, help_text="View filters: /filter completed|habits|tag|priority|reset.")
