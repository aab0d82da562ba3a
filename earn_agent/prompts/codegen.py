"""Brief and prompt templates for the code-generation CLI."""

BRIEF_TEMPLATE = """# Bounty: {title}

## Type: {bounty_type}

## Description
{description}

## Requirements
{requirements}

## Expected Deliverable
{deliverable_format}

## Instructions
- Produce the deliverable described above.
- Write all output files in the current directory.
- Create a SUBMISSION.md summarizing what was produced and how to use it.
- Be thorough and production-quality.
"""

CODEGEN_PROMPT = """You are working on a Superteam Earn bounty: "{title}".

Type: {bounty_type}

Description:
{description}

Requirements:
{requirements}

Deliverable format: {deliverable_format}

Instructions:
1. Read the BRIEF.md in this directory for full context.
2. Produce the required deliverable. Write files, code, reports as needed.
3. Create a SUBMISSION.md file summarizing what you produced.
4. Ensure everything is complete and production-quality.
"""

REPO_INSTRUCTIONS = """
This is a development bounty, so the deliverable must live in a public repository:
5. Initialize a git repository in this directory and commit all files.
6. Create a public GitHub repository named "{repo_name}" with the gh CLI
   (gh repo create {repo_name} --public --source . --push).
7. Write the resulting repository URL, and nothing else, to {repo_url_file}.
"""
