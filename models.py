import dataclasses
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

# Compliance status values
STATUS_MET = "met"
STATUS_PARTIALLY_MET = "partially-met"
STATUS_NOT_MET = "not-met"  # kept for report compatibility, never produced by the classifier
STATUS_UNKNOWN = "unknown"
STATUSES = (STATUS_MET, STATUS_PARTIALLY_MET, STATUS_NOT_MET, STATUS_UNKNOWN)


@dataclasses.dataclass(frozen=True)
class Requirement:
    """A single checklist requirement. Loaded once, never mutated."""
    id: int
    standard: int
    title: str
    description: str = ""
    evidence_examples: Tuple[str, ...] = ()


@dataclasses.dataclass(frozen=True)
class Standard:
    """A named group of requirements (e.g. 'Protecting Patients')."""
    id: int
    name: str
    description: str
    requirements: Tuple[Requirement, ...] = ()


@dataclasses.dataclass(frozen=True)
class SourceDocument:
    """Text of a submission or reference document, already extracted."""
    id: str
    name: str
    extracted_text: str
    source_url: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class Sentence:
    text: str
    ordinal: int  # 1-based position among the kept sentences

    @property
    def location(self) -> str:
        return f"Sentence {self.ordinal}"


@dataclasses.dataclass(frozen=True)
class IndexEntry:
    """One indexed reference sentence."""
    doc_id: str
    source_doc_name: str
    source_url: Optional[str]
    sentence: str
    tokens: Tuple[str, ...]
    token_set: FrozenSet[str]
    location: str


@dataclasses.dataclass
class Evidence:
    """A text excerpt believed to support compliance with a requirement."""
    source_doc_name: str
    excerpt: str
    location: str
    relevance_score: float
    confidence: Optional[float] = None
    source_url: Optional[str] = None


@dataclasses.dataclass
class GoldStandard:
    """Three-layer remediation guidance for one requirement or question."""
    requirement_id: str
    principle: str
    practical_controls: List[str]
    example_wording: str
    template_family: str = "generic"  # 'curated' | 'theme:<name>' | 'generic'
    benchmark: Optional[str] = None  # excerpt from a reference document
    benchmark_source: Optional[str] = None

    def as_text(self) -> str:
        controls = "\n".join(f"- {c}" for c in self.practical_controls)
        text = (
            f"Principle: {self.principle}\n"
            f"Practical controls:\n{controls}\n"
            f"Example wording: {self.example_wording}"
        )
        if self.benchmark:
            text += f"\nBenchmark (from {self.benchmark_source}): \"...{self.benchmark}...\""
        return text


@dataclasses.dataclass
class RequirementResult:
    requirement_id: int
    title: str
    status: str
    evidence: List[Evidence]
    gaps: List[str]
    recommendations: List[str]
    confidence_score: float
    gold_standard: GoldStandard
    current_text_summary: str = ""


@dataclasses.dataclass
class CanonicalQuestionItem:
    id: str               # 'Q1'..'Qn'
    type: str             # 'extraction' | 'analysis'
    stem: str
    answer_text: str
    detected: bool


@dataclasses.dataclass
class CanonicalRequirementItem:
    id: str               # 'R1'..'Rn'
    requirement_text: str
    provider_narrative: str
    attach_evidence_prompt_detected: bool
    detected: bool


@dataclasses.dataclass
class CanonicalQuestionnaireModel:
    """Fixed-cardinality view of a submission: every slot present, detected or not."""
    questions: List[CanonicalQuestionItem]
    requirements: List[CanonicalRequirementItem]

    def requirement(self, item_id: str) -> Optional[CanonicalRequirementItem]:
        return next((r for r in self.requirements if r.id == item_id), None)


@dataclasses.dataclass
class AnalysisResult:
    id: str
    document_id: str
    timestamp: str
    requirement_results: List[RequirementResult]
    summary: Dict[str, Any]
    canonical: Optional[CanonicalQuestionnaireModel] = None
    aborted: bool = False


# --- Questionnaire analysis -------------------------------------------------

@dataclasses.dataclass
class ExtractedField:
    question_id: str
    label: str
    value: str
    status: str


@dataclasses.dataclass
class QuestionResponse:
    question_id: str
    question: str
    original_answer: str
    status: str
    recommendations: List[str]
    evidence_references: List[Evidence]
    gold_standard: Optional[GoldStandard] = None


@dataclasses.dataclass
class RequirementAssessment:
    id: str
    title: str
    status: str
    is_priority: bool
    current_text_summary: str
    inspection_questions: List[str]
    actions: List[str]
    evidence_anchors: List[Evidence]
    gold_standard: Optional[GoldStandard] = None


@dataclasses.dataclass
class QuestionnaireAnalysis:
    id: str
    document_id: str
    timestamp: str
    responses: List[QuestionResponse]
    extracted_fields: List[ExtractedField]
    requirement_assessments: List[RequirementAssessment]
    overall_completeness: int
    gaps_identified: List[str] = dataclasses.field(default_factory=list)
    best_practice_recommendations: List[str] = dataclasses.field(default_factory=list)


@dataclasses.dataclass
class ProgramIngestion:
    """Answers inferred from a programme document, keyed by 'Q<n>' / 'R<n>'."""
    document_id: str
    inferred: Dict[str, str] = dataclasses.field(default_factory=dict)
    confidence: Dict[str, float] = dataclasses.field(default_factory=dict)
