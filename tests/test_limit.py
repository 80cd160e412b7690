import pytest

from procparse.common import IncompleteError, InternalError
from procparse.limit import Limit, parse_limit_value, parse_limits

SAMPLE = """Limit                     Soft Limit           Hard Limit           Units     
Max cpu time              unlimited            unlimited            seconds   
Max file size             unlimited            unlimited            bytes     
Max data size             unlimited            unlimited            bytes     
Max stack size            8388608              unlimited            bytes     
Max core file size        0                    unlimited            bytes     
Max resident set          unlimited            unlimited            bytes     
Max processes             63632                63632                processes 
Max open files            1024                 1048576              files     
Max locked memory         65536                65536                bytes     
Max address space         unlimited            unlimited            bytes     
Max file locks            unlimited            unlimited            locks     
Max pending signals       63632                63632                signals   
Max msgqueue size         819200               819200               bytes     
Max nice priority         0                    0                    
Max realtime priority     0                    0                    
Max realtime timeout      unlimited            unlimited            us        
"""


def test_parse_limit_value_unlimited():
    assert parse_limit_value("unlimited") is None


def test_parse_limit_value_number():
    assert parse_limit_value("8388608") == 8388608


@pytest.mark.parametrize("text", ["abc", "-1", "18446744073709551616", ""])
def test_parse_limit_value_invalid(text):
    with pytest.raises(InternalError):
        parse_limit_value(text)


def test_parse_limits_sample():
    limits = parse_limits(SAMPLE)
    assert limits.max_cpu_time == Limit(None, None)
    assert limits.max_stack_size == Limit(8388608, None)
    assert limits.max_core_file_size == Limit(0, None)
    assert limits.max_open_files == Limit(1024, 1048576)
    assert limits.max_msgqueue_size == Limit(819200, 819200)
    assert limits.max_realtime_timeout == Limit(None, None)


def test_unitless_priority_limits():
    limits = parse_limits(SAMPLE.replace("Max nice priority         0                    0",
                                         "Max nice priority         10                   20"))
    assert limits.max_nice_priority == Limit(10, 20)
    assert limits.max_realtime_priority == Limit(0, 0)


def test_missing_limit_is_error():
    text = "\n".join(line for line in SAMPLE.splitlines() if not line.startswith("Max cpu time"))
    with pytest.raises(IncompleteError):
        parse_limits(text)


def test_bad_value_is_error():
    with pytest.raises(InternalError):
        parse_limits(SAMPLE.replace("8388608", "lots"))


def test_short_line_is_error():
    with pytest.raises(IncompleteError):
        parse_limits(SAMPLE + "Max\n")