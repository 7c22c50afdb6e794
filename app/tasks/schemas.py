from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from app.models import TaskStatus, PriorityLevel

class TaskCreate(BaseModel):
    case_id: int
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    assigned_to: Optional[int] = None
    status: TaskStatus = TaskStatus.PENDING
    priority: PriorityLevel = PriorityLevel.MEDIUM
    due_date: Optional[datetime] = None

class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    assigned_to: Optional[int] = None
    status: Optional[TaskStatus] = None
    priority: Optional[PriorityLevel] = None
    due_date: Optional[datetime] = None

class TaskResponse(BaseModel):
    id: int
    case_id: int
    title: str
    description: Optional[str] = None
    assigned_to: Optional[int] = None
    status: TaskStatus
    priority: PriorityLevel
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_by: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
