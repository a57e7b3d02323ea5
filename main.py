from fastapi import FastAPI
from db.init import init_db
from dotenv import load_dotenv
import os

load_dotenv()

from routers import users, services, bookings
from fastapi.middleware.cors import CORSMiddleware


origins = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if o.strip()
]


app = FastAPI(title="ServiceHub Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,          # cannot be ["*"] if allow_credentials=True
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def startup():
    init_db(seed=os.getenv("SEED_DEFAULTS", "true").lower() in {"1", "true", "yes"})


@app.get("/health")
def health_check():
    return {"status": "ok"}


# Routers
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(services.router, prefix="/api/services", tags=["Services"])
app.include_router(bookings.router, prefix="/api", tags=["Bookings"])


@app.get("/")
def root():
    return {"message": "ServiceHub Backend running successfully"}
