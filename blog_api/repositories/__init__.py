# Repositories package.
#
# Repositories wrap an AsyncSession and own every SQL statement for their
# aggregate.  They flush but never commit; the ``get_db`` dependency owns
# the transaction boundary.
