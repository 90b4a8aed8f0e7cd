"""
Agent implementations for ReviewLens.

Contains the modules that move review data through the pipeline:
- Ingestion Agent (files, Google Sheets)
- Persona Grouping
- Summarization and Strategic Analysis Agents
- Trend and Persona Comparison Agents
- Exploration Agents (deep dive, chat, suggested questions)
- Draft Reply Agent and Sample Data Generator
- Report Data Aggregator
"""
