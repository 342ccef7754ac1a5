import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from gymdesk.auth import SessionResolver, SessionSlot
from gymdesk.config import LOG_LEVEL
from gymdesk.routers import auth, exercises, payments, progress, routines, students, teachers
from gymdesk.seed import create_store


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    store = create_store()
    app.state.store = store
    app.state.resolver = SessionResolver(store, SessionSlot())
    yield
    store.session.close()


app = FastAPI(title="Gymdesk", lifespan=lifespan)

app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(teachers.router, prefix="/api/teachers", tags=["teachers"])
app.include_router(students.router, prefix="/api/students", tags=["students"])
app.include_router(routines.router, prefix="/api/routines", tags=["routines"])
app.include_router(exercises.router, prefix="/api/exercises", tags=["exercises"])
app.include_router(progress.router, prefix="/api/progress", tags=["progress"])
app.include_router(payments.router, prefix="/api/payments", tags=["payments"])
