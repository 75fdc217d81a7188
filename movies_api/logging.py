from loguru import logger
import sys


ACCESS_FORMAT = "[{time:YYYY-MM-DD[T]HH:mm:ss.SSS!UTC}Z] {message}"
ERROR_FORMAT = "[{time:YYYY-MM-DD[T]HH:mm:ss.SSS!UTC}Z] {level}: {message}"


def _not_access(record) -> bool:
    return not record["extra"].get("access")


def _request_log_record(record) -> bool:
    return bool(record["extra"].get("access")) or record["level"].no >= logger.level("ERROR").no


def _request_log_format(record) -> str:
    # для callable-формата loguru сам не дописывает \n{exception}
    if record["extra"].get("access"):
        return ACCESS_FORMAT + "\n"
    return ERROR_FORMAT + "\n{exception}"


def setup_console(level: str = "INFO") -> None:
    logger.remove()
    logger.add(sys.stderr, level=level, backtrace=True, diagnose=False, filter=_not_access)


def add_request_log(path: str) -> int:
    """
    Append-only лог запросов и ошибок.
    enqueue=True: запись идёт в отдельном потоке, запрос её не ждёт.
    delay=True: файл открывается при первой записи, ошибка открытия уходит в stderr (catch=True) и не роняет старт.
    """
    return logger.add(
        path,
        level="INFO",
        format=_request_log_format,
        filter=_request_log_record,
        enqueue=True,
        backtrace=True,
        diagnose=False,
        catch=True,
        delay=True,
    )


def remove_request_log(sink_id: int) -> None:
    # remove() дожидается, пока очередь будет выписана в файл
    logger.remove(sink_id)


access_logger = logger.bind(access=True)

setup_console()
