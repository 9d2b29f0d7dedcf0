# DEPENDENCIES
from typing import List
from config.model_config import ModelConfig
from services.data_models import RiskLevel
from services.data_models import ClauseResult
from services.data_models import ClauseCategory
from services.data_models import count_risk_levels


ANALYSIS_TOOL_NAME  = "analyze_contract_clauses"
SYNTHESIS_TOOL_NAME = "synthesize_contract_analysis"


_VERDICT_PROPERTIES = {"summary"            : {"type"        : "string",
                                               "description" : "2-3 sentence summary of the contract type, parties involved, and main purpose",
                                              },
                       "overall_risk_score" : {"type"        : "number",
                                               "minimum"     : 1,
                                               "maximum"     : 10,
                                               "description" : "Overall risk score from 1 (very safe/favorable) to 10 (very risky/unfavorable)",
                                              },
                       "risk_summary"       : {"type"        : "string",
                                               "description" : "1-2 sentence explanation of the overall risk level and main concerns",
                                              },
                      }


_CLAUSE_SCHEMA      = {"type"       : "object",
                       "properties" : {"category"       : {"type"        : "string",
                                                           "enum"        : [category.value for category in ClauseCategory],
                                                           "description" : "The category of the clause",
                                                          },
                                       "exact_text"     : {"type"        : "string",
                                                           "description" : "The exact text from the contract for this clause (or a representative excerpt if very long)",
                                                          },
                                       "risk_level"     : {"type"        : "string",
                                                           "enum"        : [level.value for level in RiskLevel],
                                                           "description" : "The risk level of this clause",
                                                          },
                                       "explanation"    : {"type"        : "string",
                                                           "description" : "Plain English explanation of what this clause means and why it matters",
                                                          },
                                       "recommendation" : {"type"        : "string",
                                                           "description" : "Suggested action or negotiation point for this clause",
                                                          },
                                      },
                       "required"   : ["category", "exact_text", "risk_level", "explanation", "recommendation"],
                      }


# Structured output contract shared by whole-document and chunk requests
CLAUSE_ANALYSIS_TOOL = {"name"         : ANALYSIS_TOOL_NAME,
                        "description"  : "Analyze a contract and extract categorized clauses with risk assessments",
                        "input_schema" : {"type"       : "object",
                                          "properties" : {**_VERDICT_PROPERTIES,
                                                          "clauses" : {"type"  : "array",
                                                                       "items" : _CLAUSE_SCHEMA,
                                                                      },
                                                         },
                                          "required"   : ["summary", "overall_risk_score", "risk_summary", "clauses"],
                                         },
                       }


SYNTHESIS_TOOL       = {"name"         : SYNTHESIS_TOOL_NAME,
                        "description"  : "Produce the final document-level verdict for a contract analyzed in sections",
                        "input_schema" : {"type"       : "object",
                                          "properties" : dict(_VERDICT_PROPERTIES),
                                          "required"   : ["summary", "overall_risk_score", "risk_summary"],
                                         },
                       }


_ANALYST_ROLE        = "You are an expert legal contract analyst AI."


_ANALYSIS_GUIDELINES = """## Analysis Guidelines

### High-Risk Patterns to Flag
- **Unlimited or uncapped liability** - Any clause that doesn't limit financial exposure
- **Broad indemnification** - Requirements to defend/hold harmless for broad categories of claims
- **Auto-renewal with long notice periods** - Automatic renewals requiring 60+ days notice to cancel
- **Unilateral termination rights** - One party can terminate easily while the other cannot
- **Unfavorable IP assignment** - Broad transfer of intellectual property rights
- **Restrictive non-compete** - Overly broad geographic or time restrictions
- **Unfavorable payment terms** - Net 60+ payment terms, unclear payment obligations
- **Broad confidentiality obligations** - Overly long duration or scope
- **Mandatory arbitration** - Especially in unfavorable jurisdictions
- **Automatic price increases** - Uncapped or unclear pricing changes
- **Liquidated damages** - Pre-set penalty amounts that may be excessive
- **Most Favored Nation clauses** - Requirements to match competitor pricing/terms
- **Assignment restrictions** - Limitations on transferring the contract
- **Warranty disclaimers** - AS-IS provisions or limited warranties

### Risk Level Definitions
- **LOW**: Standard, balanced terms that are typical for this contract type
- **MEDIUM**: Somewhat one-sided terms that warrant attention but are negotiable
- **HIGH**: Significantly unfavorable terms that should be negotiated or carefully considered
- **CRITICAL**: Extremely risky terms that could cause major financial or legal exposure"""


def build_analysis_prompt(contract_text: str) -> str:
    """
    Prompt for a contract small enough to be analyzed in one request
    """
    return f"""{_ANALYST_ROLE} Your task is to analyze the following contract and identify all significant clauses, with special attention to potentially risky or unfavorable terms.

{_ANALYSIS_GUIDELINES}

### Instructions
1. Read the entire contract carefully
2. Identify ALL significant clauses, not just risky ones
3. For each clause, extract the exact relevant text
4. Categorize each clause appropriately
5. Assess risk from the perspective of someone reviewing/signing this contract
6. Provide clear, actionable explanations and recommendations
7. Calculate an overall risk score based on the cumulative risk of all clauses

## Contract Text

{contract_text}

---

Analyze this contract thoroughly. Be comprehensive in identifying clauses, but focus your explanations on the most important issues."""


def build_chunk_analysis_prompt(chunk_text: str, chunk_index: int, total_chunks: int) -> str:
    """
    Prompt for one section of a long contract; tells the model it only sees part of the document
    """
    return f"""{_ANALYST_ROLE} You are analyzing part {chunk_index} of {total_chunks} of a long contract.

{_ANALYSIS_GUIDELINES}

## Instructions
- Extract and analyze all significant clauses in this section
- Note that this is only a portion of the full contract
- Focus on identifying clauses and their risk levels
- Other sections may contain related terms, so do not assume a protection is missing just because it is absent here
- Summarize only what this section covers

## Contract Section {chunk_index}/{total_chunks}

{chunk_text}

---

Analyze this section and extract all significant clauses."""


def build_clause_digest(clauses: List[ClauseResult]) -> str:
    """
    One numbered line per clause: category, risk level and the start of the explanation
    """
    preview_chars = ModelConfig.SYNTHESIS_DIGEST["explanation_preview_chars"]
    lines         = list()

    for i, clause in enumerate(clauses, start = 1):
        explanation = clause.explanation[:preview_chars]

        if (len(clause.explanation) > preview_chars):
            explanation += "..."

        lines.append(f"{i}. [{clause.category}] {clause.risk_level}: {explanation}")

    return "\n".join(lines)


def build_synthesis_prompt(clauses: List[ClauseResult], chunk_summaries: List[str]) -> str:
    """
    Prompt turning section summaries and deduplicated clauses into one verdict

    The per-level counts let the model weigh cumulative risk, not only the worst clause
    """
    distribution     = count_risk_levels(clauses)
    section_overview = "\n\n".join(chunk_summaries)

    return f"""{_ANALYST_ROLE} You have analyzed a long contract in sections. Here are the findings:

## Section Summaries
{section_overview}

## All Clauses Found ({len(clauses)} total)
{build_clause_digest(clauses)}

## Risk Distribution
- Critical: {distribution[RiskLevel.CRITICAL.value]}
- High: {distribution[RiskLevel.HIGH.value]}
- Medium: {distribution[RiskLevel.MEDIUM.value]}
- Low: {distribution[RiskLevel.LOW.value]}

Based on these findings, provide:
1. A 2-3 sentence summary of the whole contract
2. An overall risk score (1-10) considering all clauses together
3. A risk summary explaining the main concerns

Consider cumulative risk - multiple medium-risk clauses together may indicate a high overall risk."""

