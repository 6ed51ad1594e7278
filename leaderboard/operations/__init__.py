"""
Operations Layer

Business logic operations that compose database methods into complete
workflows, with validation done before anything is written.

Architecture:
- Database layer: Pure data access and CRUD operations
- Operations layer: Business logic composition and workflows
- Services layer: Whole-store recomputation and read models

Each operations module focuses on a specific domain:
- MatchOperations: Match recording and rating updates
- PlayerOperations: Player registration and match history
- AdminOperations: Season resets
"""
