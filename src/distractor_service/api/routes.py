from fastapi import APIRouter, Depends

from distractor_service.api.config import ApiSettings
from distractor_service.api.dependencies import (
    get_app_settings,
    get_evaluation_config,
    get_version,
)
from distractor_service.api.schemas import (
    HealthResponse,
    ShapleyRequest,
    ShapleyResponse,
    SimulationRequest,
    SimulationResponse,
)
from distractor_service.api.service import EvaluationService
from distractor_service.config import EvaluationConfig

router = APIRouter(prefix="/api/v1")


def get_service(
    settings: ApiSettings = Depends(get_app_settings),
    config: EvaluationConfig = Depends(get_evaluation_config),
) -> EvaluationService:
    return EvaluationService(settings, config)


@router.post("/simulations")
def run_simulation(
    request: SimulationRequest,
    service: EvaluationService = Depends(get_service),
) -> SimulationResponse:
    return service.simulate(request)


@router.post("/shapley")
def run_shapley(
    request: ShapleyRequest,
    service: EvaluationService = Depends(get_service),
) -> ShapleyResponse:
    return service.shapley(request)


@router.get("/health")
async def health_check(
    version: str = Depends(get_version),
) -> HealthResponse:
    return HealthResponse(version=version)
