"""
Structured logging for summed_area operations.

`log_action` wraps a function so that each call is logged as a JSON record
when it starts, when it succeeds (with execution time and result type) and
when it fails (with the exception, which is then re-raised).
"""

import functools
import json
import logging
import time
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Union

import numpy as np

logger = logging.getLogger(__name__)


def json_serializable(
    obj: Any, max_depth: int = 10, max_length: int = 100
) -> Union[str, Dict, List]:
    if max_depth <= 0:
        return str(obj)

    if isinstance(obj, np.ndarray):
        return f"<ndarray shape={obj.shape} dtype={obj.dtype}>"
    if isinstance(obj, np.generic):
        return obj.item() if obj.dtype.kind in "biuf" else str(obj)
    if callable(obj):
        return f"<function {obj.__name__}>" if hasattr(obj, "__name__") else str(obj)
    if isinstance(obj, (list, tuple)):
        serialized = [
            json_serializable(item, max_depth - 1, max_length)
            for item in obj[:max_length]
        ]
        return serialized + ["..."] if len(obj) > max_length else serialized
    if isinstance(obj, dict):
        return {
            str(key): json_serializable(value, max_depth - 1, max_length)
            for key, value in obj.items()
        }
    if isinstance(obj, (int, float, str, bool, type(None))):
        return obj
    return repr(obj) if hasattr(obj, "__dict__") or hasattr(obj, "__slots__") else str(obj)


def log_action(
    action_name: Optional[Union[str, Callable]] = None,
    log_level: int = logging.INFO,
    exclude_args: Optional[List[str]] = None,
    max_depth: int = 2,
    max_length: int = 10,
    detailed_logging: bool = True,
) -> Callable:
    exclude_args = exclude_args or []

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            if not logger.isEnabledFor(log_level):
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    logger.error(f"Error in {func.__name__}: {type(e).__name__}: {e}")
                    raise

            start_time = time.perf_counter()
            action = action_name if isinstance(action_name, str) else func.__name__
            context: Dict[str, Any] = {
                "ts": datetime.now().strftime("%H:%M:%S.%f")[:-3],
                "action": action,
                "status": "started",
                "function": f"{func.__module__}.{func.__name__}",
            }

            if detailed_logging:
                arg_names = func.__code__.co_varnames[: func.__code__.co_argcount]
                context["args"] = json_serializable(
                    {
                        name: arg
                        for name, arg in zip(arg_names, args)
                        if name not in exclude_args
                    },
                    max_depth,
                    max_length,
                )
                context["kwargs"] = json_serializable(
                    {k: v for k, v in kwargs.items() if k not in exclude_args},
                    max_depth,
                    max_length,
                )

            logger.log(log_level, json.dumps(context, indent=2))

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                context.update(
                    {
                        "status": "error",
                        "error": str(e),
                        "error_type": type(e).__name__,
                        "exec_time": f"{time.perf_counter() - start_time:.3f}s",
                    }
                )
                logger.exception(json.dumps(context, indent=2))
                raise

            context.update(
                {
                    "status": "success",
                    "exec_time": f"{time.perf_counter() - start_time:.3f}s",
                    "result_type": type(result).__name__,
                }
            )
            if detailed_logging:
                context["result"] = json_serializable(result, max_depth, max_length)
            logger.log(log_level, json.dumps(context, indent=2))
            return result

        return wrapper

    return decorator(action_name) if callable(action_name) else decorator
