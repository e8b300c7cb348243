from pydantic import BaseModel, Field

from app.services.ai.sentiment.contracts import BatchSummary, ClassificationResult


class AnalyzeRequest(BaseModel):
    text: str = Field(..., min_length=1)


class BatchAnalyzeRequest(BaseModel):
    texts: list[str] = Field(default_factory=list)


class SentimentOut(BaseModel):
    text: str
    sentiment: str
    score: float

    @classmethod
    def from_result(cls, result: ClassificationResult) -> "SentimentOut":
        return cls(text=result.text, sentiment=result.label.value, score=result.confidence)


class BatchSummaryOut(BaseModel):
    total: int
    positive: int
    negative: int
    neutral: int

    @classmethod
    def from_summary(cls, summary: BatchSummary) -> "BatchSummaryOut":
        return cls(
            total=summary.total,
            positive=summary.positive,
            negative=summary.negative,
            neutral=summary.neutral,
        )


class BatchAnalyzeResponse(BaseModel):
    results: list[SentimentOut]
    summary: BatchSummaryOut


class HealthResponse(BaseModel):
    status: str
    version: str
    features: str
