"""Service Layer — orchestrates core functions around the persistence shell."""
