from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware

from app.api.attendees.routes import router as attendees_router
from app.api.check_in.routes import router as check_in_router
from app.api.stats.routes import router as stats_router
from app.api.users.crud import user as user_crud
from app.api.users.routes import router as users_router
from app.core.config import Environment, settings
from app.core.database import SessionLocal, create_db


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.ENVIRONMENT != Environment.TEST:
        create_db()
        with SessionLocal() as db:
            user_crud.ensure_owner(db)
    yield


app = FastAPI(lifespan=lifespan)

# Include routers
app.include_router(attendees_router, prefix='/attendees', tags=['Attendees'])
app.include_router(check_in_router, prefix='/check-in', tags=['Check In'])
app.include_router(stats_router, prefix='/stats', tags=['Stats'])
app.include_router(users_router, prefix='/users', tags=['Users'])

origins = ['*']
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)


@app.get('/', include_in_schema=False)
def ping():
    return Response(status_code=200)
