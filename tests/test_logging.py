import pytest

from fileshare.utils.logging import (
	LogLevel,
	debug,
	error,
	event,
	exception,
	info,
	setLevel,
	warning,
)


def test_levels_filter_output(capsys: pytest.CaptureFixture[str]):
	setLevel("warn")
	debug("Hidden debug")
	info("Hidden info")
	warning("Shown warning", Path="/a b")
	error("Shown error", "ECODE")
	err = capsys.readouterr().err
	assert "Hidden" not in err
	assert "Shown warning" in err
	assert "'/a b'" in err
	assert "Shown error" in err


def test_trace_is_debug(capsys: pytest.CaptureFixture[str]):
	assert setLevel("trace") == LogLevel.Debug
	debug("Resolved")
	event("GET", "/download/files/", Status=200)
	err = capsys.readouterr().err
	assert "Resolved" in err
	assert "GET" in err


def test_unknown_level():
	with pytest.raises(ValueError):
		LogLevel.Parse("bogus")
	assert LogLevel.Parse(" WARN ") == LogLevel.Warning


def test_exception_reports_traceback(capsys: pytest.CaptureFixture[str]):
	try:
		raise RuntimeError("Boom")
	except RuntimeError as e:
		assert exception(e, "Handler failed") is e
	err = capsys.readouterr().err
	assert "Handler failed: [RuntimeError] Boom" in err
	assert "test_exception_reports_traceback" in err


# EOF
