"""Declarative member tests for Python classes.

The `quicktest` package runs tests described as data rather than code.
Each test names a member by qualified name, describes the receiver and
the arguments with a small expression language, and states an expected
value and/or a boolean assertion about the receiver after the call.

Key features:
- an expression language with literals, member chains, comparisons
  and object literals;
- a runner that builds receivers and arguments, invokes the member and
  decides a Pass, Fail or Unknown verdict without ever raising;
- pluggable member resolution, with a resolver for ordinary classes;
- test repositories and plans stored as YAML documents.
"""
