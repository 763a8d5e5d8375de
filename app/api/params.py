"""Path parameter types shared by the routers."""
from typing import Annotated
from fastapi import Path
from app.db.session import MAX_ROW_ID

# Ids outside the column range cannot name a row; they are rejected with 422
RowId = Annotated[int, Path(ge=1, le=MAX_ROW_ID)]
