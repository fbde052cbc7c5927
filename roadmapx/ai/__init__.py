"""
Managed AI services: Amazon Comprehend (text analysis), Amazon Personalize
(recommendations) and Amazon SageMaker Pipelines (model training).
"""
