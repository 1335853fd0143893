import logging

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from shared.config import CORS_ORIGINS, HOST, LOG_LEVEL, PORT
from shared.exceptions import register_exception_handlers
from services.admissions.api.admission_router import router as admission_router
from services.student_management.api.student_router import router as student_router
from services.user_management.api.auth_router import router as auth_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(title="SchoolMate Admissions Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

@app.get("/")
def health_check():
    return {"status": "SchoolMate Admissions Backend is running ✅"}


app.include_router(auth_router)
app.include_router(admission_router)
app.include_router(student_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=HOST, port=PORT)
