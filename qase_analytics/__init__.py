"""QaseAnalytics - Qase.io QA 지표 대화형 어시스턴트"""

__version__ = "0.1.0"
