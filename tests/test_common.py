import io

from mongocompare.common import RUN_ID, PrintLogger


def test_logger_renders_fields_and_skips_none():
    stream = io.StringIO()
    logger = PrintLogger(job_name="job", stream=stream)
    logger.warn("recon_check_end", check="count", status="fail", extra=None)
    line = stream.getvalue().strip()
    assert "WARN" in line
    assert "[job]" in line
    assert RUN_ID in line
    assert line.endswith("recon_check_end check=count status=fail")


def test_logger_level_filter_and_file_mirror(tmp_path):
    stream = io.StringIO()
    log_file = tmp_path / "run.log"
    logger = PrintLogger(job_name="job", file_path=str(log_file), level="WARN", stream=stream)
    logger.info("hidden")
    logger.error("shown", err="boom here")
    assert "hidden" not in stream.getvalue()
    assert 'err="boom here"' in stream.getvalue()
    assert "shown" in log_file.read_text()
