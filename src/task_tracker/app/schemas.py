# task_tracker/app/schemas.py
from pydantic import BaseModel, Field, StrictBool, StrictStr


class TaskCreateRequest(BaseModel):
    title: StrictStr = Field(..., min_length=1, description="Заголовок задачи, не пустой")


class TaskUpdateRequest(BaseModel):
    # как и в исходном сервисе: пустое тело {} означает done=false
    done: StrictBool = Field(False, description="Выполнена ли задача")


class TaskResponse(BaseModel):
    id: int = Field(..., description="Уникальный id задачи, выдаётся хранилищем")
    title: str = Field(..., description="Заголовок задачи")
    done: bool = Field(..., description="Выполнена или нет")
