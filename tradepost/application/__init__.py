"""Application layer - DTOs, collaborator interfaces and services."""
