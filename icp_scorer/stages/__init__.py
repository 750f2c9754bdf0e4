# Scoring stages module
from .stage1_website import WebsiteAnalysisStage
from .stage2_categories import CategoryClassificationStage
from .stage3_scoring import WeightedScoringStage, calculate_icp_score
