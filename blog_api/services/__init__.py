# Services package.
#
#   blog_service      — ownership checks, pagination and partial updates
#                       for Blog, on top of BlogRepository
#   taxonomy_service  — list/create for the Category and Tag vocabularies
#
# Blog service functions take the repository as their first argument and
# taxonomy functions take an AsyncSession; in both cases the router layer
# controls the transaction boundary via the ``get_db`` dependency.
