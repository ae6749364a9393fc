"""Run parameter validation using Pydantic (v2)"""
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, field_validator, model_validator


class OptimizationParams(BaseModel):
    population_path: Optional[str] = None
    competitors_path: Optional[str] = None
    output_path: Optional[str] = None
    num_locations: int = Field(ge=1, le=100, default=10)
    max_iterations: int = Field(ge=1, le=1000, default=30)
    convergence_threshold: float = Field(gt=0, default=0.001)
    max_sample_size: int = Field(gt=0, default=20000)
    regular_sample_rate: float = Field(ge=0, le=1, default=0.05)
    seed: Optional[int] = Field(None, ge=0)
    metrics_file: Optional[str] = None

    @field_validator('population_path', 'competitors_path', 'output_path', 'metrics_file')
    @classmethod
    def validate_path(cls, v: Optional[str]):
        if v is not None and not v.strip():
            raise ValueError("path must not be blank")
        return v

    @model_validator(mode='after')
    def _validate_distinct_inputs(self):
        if (self.population_path and self.competitors_path
                and self.population_path == self.competitors_path):
            raise ValueError('population and competitor sources must be different files')
        return self


def validate_optimization_params(params: Dict[str, Any]) -> Dict[str, Any]:
    """Validate and normalize optimization run parameters"""
    model = OptimizationParams(**(params or {}))
    return model.model_dump(exclude_none=True)
