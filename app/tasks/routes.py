from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from sqlalchemy import desc

from app.database import get_db
from app.errors import NotFoundError
from app.models import User, Case, Task, TaskStatus
from app.tasks.schemas import TaskCreate, TaskUpdate, TaskResponse
from app.services.activity_service import notify_user
from app.auth.dependencies import require_staff

router = APIRouter(prefix="/tasks", tags=["Tasks"])


def get_task_or_404(db: Session, task_id: int) -> Task:
    task = db.query(Task).filter(Task.id == task_id).first()
    if not task:
        raise NotFoundError("task_not_found")
    return task

@router.get("/case/{case_id}", response_model=List[TaskResponse])
def get_tasks_by_case(
    case_id: int,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    return db.query(Task).filter(Task.case_id == case_id).order_by(
        Task.due_date, desc(Task.id)
    ).all()

@router.get("/mine", response_model=List[TaskResponse])
def get_my_tasks(
    status: Optional[TaskStatus] = None,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    """Tasks assigned to the current user."""
    query = db.query(Task).filter(Task.assigned_to == current_user.id)
    if status:
        query = query.filter(Task.status == status)
    return query.order_by(Task.due_date, desc(Task.id)).all()

@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: int,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    return get_task_or_404(db, task_id)

@router.post("/", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task_data: TaskCreate,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    if not db.query(Case).filter(Case.id == task_data.case_id).first():
        raise NotFoundError("case_not_found")

    task = Task(**task_data.dict(), created_by=current_user.id)
    if task.status == TaskStatus.COMPLETED:
        task.completed_at = datetime.utcnow()
    db.add(task)
    db.flush()

    if task.assigned_to and task.assigned_to != current_user.id:
        notify_user(
            db, task.assigned_to, "New Task Assigned",
            f"You have been assigned a task: {task.title}", "task_assigned", task.id
        )

    db.commit()
    db.refresh(task)
    return task

@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    task_update: TaskUpdate,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    task = get_task_or_404(db, task_id)
    old_assignee = task.assigned_to

    update_data = task_update.dict(exclude_unset=True)
    for field, value in update_data.items():
        setattr(task, field, value)

    new_status = update_data.get("status")
    if new_status == TaskStatus.COMPLETED and not task.completed_at:
        task.completed_at = datetime.utcnow()
    elif new_status and new_status != TaskStatus.COMPLETED:
        task.completed_at = None

    new_assignee = update_data.get("assigned_to")
    if new_assignee and new_assignee != old_assignee and new_assignee != current_user.id:
        notify_user(
            db, new_assignee, "Task Assigned",
            f"You have been assigned a task: {task.title}", "task_assigned", task.id
        )

    db.commit()
    db.refresh(task)
    return task
