import logging
from typing import Optional, Union

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from matsolver import (
    Matrix,
    MatrixError,
    build_basic_op_result,
    build_equation_result,
    build_expression_result,
)
from matsolver.engine import BASIC_OPS

logger = logging.getLogger(__name__)

app = FastAPI(title="MatSolver API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class MatrixIn(BaseModel):
    name: str
    data: list[list[float]]


class ExpressionRequest(BaseModel):
    expression: str
    matrices: list[MatrixIn]


class BasicOpRequest(BaseModel):
    operation: str
    matrix: MatrixIn


class EquationRequest(BaseModel):
    m: MatrixIn
    n: MatrixIn
    p: MatrixIn


class StepInfo(BaseModel):
    type: str
    value: Optional[str] = None
    title: Optional[str] = None
    data: Optional[list[list[Union[float, str]]]] = None


class MatrixOut(BaseModel):
    name: str
    rows: int
    cols: int
    data: list[list[float]]


class SolveResponse(BaseModel):
    title: str
    operation: str
    expression: Optional[str] = None
    result: MatrixOut
    steps: list[StepInfo]


def _to_matrix(m: MatrixIn) -> Matrix:
    return Matrix.from_rows(m.name.strip(), m.data)


def _run(fn) -> dict:
    try:
        return fn()
    except MatrixError as e:
        logger.info("Rejected request: %s", e)
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Unexpected solver failure")
        raise HTTPException(status_code=500, detail=f"Solver error: {str(e)}")


@app.get("/api/health")
def health():
    return {"status": "ok"}


@app.post("/api/expression", response_model=SolveResponse)
def expression(req: ExpressionRequest):
    text = req.expression.strip()
    if not text:
        raise HTTPException(status_code=400, detail="Expression cannot be empty.")
    return _run(lambda: build_expression_result(
        text, [_to_matrix(m) for m in req.matrices]))


@app.post("/api/basic-op", response_model=SolveResponse)
def basic_op(req: BasicOpRequest):
    op = req.operation.strip().upper()
    if op not in {o.value for o in BASIC_OPS}:
        raise HTTPException(status_code=400, detail=f"Unsupported operation: {req.operation}")
    return _run(lambda: build_basic_op_result([_to_matrix(req.matrix)], op))


@app.post("/api/equation", response_model=SolveResponse)
def solve_equation(req: EquationRequest):
    return _run(lambda: build_equation_result(
        _to_matrix(req.m), _to_matrix(req.n), _to_matrix(req.p)))
