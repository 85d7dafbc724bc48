"""Prompts for StatementAnalysisAgent: system and user prompt templates for statement analysis."""

SYSTEM_PROMPT = """
You are a personal finance analyst for Indian bank customers.
You will be given the plain text of a bank statement. Amounts are in Indian Rupees (INR).
Output ONLY a valid JSON object, with no explanations, commentary, or extra text.
"""

USER_PROMPT_TEMPLATE = """
Analyze this bank statement text and extract financial information. Return a JSON object with the following structure:

{{
  "summary": {{
    "totalCredits": number,
    "totalDebits": number,
    "netBalance": number,
    "transactionCount": number,
    "period": {{
      "start": "YYYY-MM-DD",
      "end": "YYYY-MM-DD"
    }}
  }},
  "categories": {{
    "groceries": number,
    "dining": number,
    "entertainment": number,
    "shopping": number,
    "travel": number,
    "utilities": number,
    "healthcare": number,
    "education": number,
    "investments": number,
    "transfers": number,
    "other": number
  }},
  "monthlySpending": {{
    "average": number,
    "highest": number,
    "lowest": number
  }},
  "insights": {{
    "spendingPattern": "string description",
    "riskLevel": "low|medium|high",
    "recommendations": ["string array of suggestions"]
  }}
}}

Bank statement text:
{statement_text}
"""
