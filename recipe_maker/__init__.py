"""Describes the recipe maker. Centres around two things.

- Turning whatever the language model hands back into `Recipe` records.
  The model is asked for JSON but answers in markdown fences, drops fields and
  occasionally returns an object where a list was asked for.
- Keeping a wishlist of those records that survives restarts.

The model and the storage both sit behind small interfaces so they can be faked.
"""
