from datetime import datetime
from typing import Any
from collections.abc import Callable


# Type aliases for Lambda payloads
type LambdaEvent = dict[str, Any]
type LambdaContext = Any
type LambdaResponse = dict[str, Any]

# Type aliases for injected registry collaborators
type Clock = Callable[[], datetime]
type IdFactory = Callable[[], str]
