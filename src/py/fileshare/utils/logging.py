import sys
import time
import threading
from enum import Enum
from typing import NamedTuple, Any, TypeAlias
from contextvars import ContextVar
from .term import Term


LogOrigin: ContextVar[str] = ContextVar("LogOrigin", default="fileshare")

TValue: TypeAlias = bool | int | float | str | None


class LogType(Enum):
	Message = 0  # A general information message
	Event = 20  # An event, like a served request


class LogLevel(Enum):
	Debug = 0
	Info = 10
	Warning = 30  # A Warning
	Error = 40  # A managed error
	Exception = 50  # An un-managed error

	@staticmethod
	def Parse(name: str) -> "LogLevel":
		"""Parses a level name as given on the command line."""
		key: str = name.strip().lower()
		if key not in LOG_LEVEL_NAMES:
			raise ValueError(
				f"Unknown log level '{name}', pick one of: {', '.join(LOG_LEVEL_NAMES)}"
			)
		return LOG_LEVEL_NAMES[key]


LOG_LEVEL_NAMES: dict[str, LogLevel] = {
	"trace": LogLevel.Debug,
	"debug": LogLevel.Debug,
	"info": LogLevel.Info,
	"warn": LogLevel.Warning,
	"warning": LogLevel.Warning,
	"error": LogLevel.Error,
}

LOG_LEVEL_COLOR = {
	LogLevel.Debug: 31,
	LogLevel.Info: 75,
	LogLevel.Warning: 202,
	LogLevel.Error: 160,
	LogLevel.Exception: 124,
}


class LogEntry(NamedTuple):
	origin: str
	time: float
	type: LogType = LogType.Message
	level: LogLevel = LogLevel.Info
	message: str | None = None
	name: str | None = None
	value: Any = None
	context: dict[str, TValue] | None = None
	icon: str | None = None


class LogState:
	"""Process-wide logging threshold. Workers write concurrently, so
	lines are written under a lock to keep them whole."""

	level: LogLevel = LogLevel.Info
	lock: threading.Lock = threading.Lock()


def setLevel(level: LogLevel | str) -> LogLevel:
	LogState.level = LogLevel.Parse(level) if isinstance(level, str) else level
	return LogState.level


def logged(level: LogLevel) -> bool:
	"""Tells if entries at the given level are currently emitted. This is
	used to guard against building entries when not necessary."""
	return level.value >= LogState.level.value


def formatData(value: Any) -> str:
	if value is None or value == () or value == [] or value == {}:
		return "◌"
	elif isinstance(value, dict):
		return " ".join(
			f"{Term.BOLD}{k}{Term.RESET}={formatData(v)}" for k, v in value.items()
		)
	elif isinstance(value, list) or isinstance(value, tuple):
		return ",".join(formatData(v) for v in value)
	elif isinstance(value, str):
		return repr(value) if " " in value else value
	elif isinstance(value, bool):
		return "✓" if value else "✗"
	elif isinstance(value, float):
		return f"{value:0.2f}"
	else:
		return str(value)


def send(entry: LogEntry) -> LogEntry:
	if not logged(entry.level):
		return entry
	icon: str = f" {entry.icon}" if entry.icon else ""
	clr: str = Term.Color(LOG_LEVEL_COLOR[entry.level])
	if entry.type == LogType.Event:
		line = f"{clr}{Term.BOLD}[{entry.origin}] {entry.name}{Term.RESET} {formatData(entry.value)} {formatData(entry.context)}{Term.RESET}\n"
	else:
		line = f"{clr}{Term.BOLD}[{entry.origin}]{Term.RESET}{icon} {entry.message} {formatData(entry.context)}{Term.RESET}\n"
	with LogState.lock:
		sys.stderr.write(line)
		sys.stderr.flush()
	return entry


def entry(
	*,
	origin: str | None = None,
	at: float | None = None,
	type: LogType = LogType.Message,
	level: LogLevel = LogLevel.Info,
	message: str | None = None,
	name: str | None = None,
	value: Any = None,
	context: dict[str, TValue],
	icon: str | None = None,
) -> LogEntry:
	return LogEntry(
		origin=origin or LogOrigin.get(),
		time=time.time() if at is None else at,
		type=type,
		level=level,
		message=message,
		name=name,
		value=value,
		context=context,
		icon=icon,
	)


def debug(
	message: str,
	*,
	origin: str | None = None,
	icon: str | None = None,
	**context: TValue,
) -> LogEntry:
	return send(
		entry(
			message=message,
			level=LogLevel.Debug,
			origin=origin,
			context=context,
			icon=icon,
		)
	)


def info(
	message: str,
	*,
	origin: str | None = None,
	icon: str | None = None,
	**context: TValue,
) -> LogEntry:
	return send(entry(message=message, origin=origin, context=context, icon=icon))


def warning(
	message: str,
	*,
	origin: str | None = None,
	icon: str | None = None,
	**context: TValue,
) -> LogEntry:
	return send(
		entry(
			message=message,
			level=LogLevel.Warning,
			origin=origin,
			context=context,
			icon=icon,
		)
	)


def error(
	message: str,
	code: int | str | None,
	*,
	origin: str | None = None,
	icon: str | None = None,
	**context: TValue,
) -> LogEntry:
	return send(
		entry(
			message=message,
			value=code,
			level=LogLevel.Error,
			origin=origin,
			context=context,
			icon=icon,
		)
	)


def event(
	event: str,
	value: Any = None,
	*,
	origin: str | None = None,
	**context: TValue,
) -> LogEntry:
	return send(
		entry(
			name=event,
			value=value,
			type=LogType.Event,
			origin=origin,
			context=context,
		)
	)


def exception(
	exception: BaseException,
	message: str | None = None,
) -> BaseException:
	try:
		lines: list[str] = [
			f"!!! EXCP {f'{message}: ' if message else ''}[{exception.__class__.__name__}] {exception}\n"
		]
		tb = exception.__traceback__
		while tb:
			code = tb.tb_frame.f_code
			lines.append(
				f"... in {code.co_name:15s} at {tb.tb_lineno:4d} in {code.co_filename}\n"
			)
			tb = tb.tb_next
		with LogState.lock:
			sys.stderr.write("".join(lines))
			sys.stderr.flush()
	except Exception:  # nosec: B110
		# Swallow all exceptions so that this function can be called from an exception
		# handler safely.
		pass

	# Return the exception so that this function can be called like:
	#   raise exception(e)
	return exception


# EOF
