from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from routers.product import router as product_router
from routers.search import router as search_router
from routers.stack import router as stack_router
from routers.metrics import router as metrics_router
import uvicorn
from env import PORT
from logger_manager import log_info


app = FastAPI(title="Slips API", description="Supplement catalog search, barcode lookup and trust scores")


@app.get("/")
def read_root():
    return RedirectResponse("/docs")

# log every request

@app.middleware("http")
async def log_requests(request: Request, call_next):
    response = await call_next(request)
    log_info(f"Request: {request.method} {request.url} -> {response.status_code}")
    return response

app.include_router(product_router, prefix="/api/product")
app.include_router(search_router, prefix="/api/search")
app.include_router(stack_router, prefix="/api/stack")
app.include_router(metrics_router, prefix="/api/metrics")

# To run the FastAPI app, use the command: uvicorn main:app --reload
if __name__ == "__main__":
    # run using fastapi directly for development purposes
    uvicorn.run(app, host="0.0.0.0", port=PORT)
