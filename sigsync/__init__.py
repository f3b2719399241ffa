"""
SigSync - resynchronizes function and primary-constructor declarations after
a change-signature refactoring.
"""
