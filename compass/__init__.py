"""Career guidance API: LLM-generated assessments, insights and career tooling."""
