"""
Core Package.

Contains the transformation logic:
- Codemod Engine
- Call-Site Rewriter and Scope Resolver
- Import Fixer
- Syntax Tree, Parser and Printer
"""
