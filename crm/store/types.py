from typing import Any, Dict

# A record is a plain mapping that always carries "id" and "createdAt".
Record = Dict[str, Any]
