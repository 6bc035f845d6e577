def reconcile_gallery(current, kept, uploaded):
    """
    Work out a product's new gallery after an edit.

    `current` is the stored gallery, `kept` the images the admin chose to keep
    (in their submitted order) and `uploaded` the URLs of files stored by this
    request. Returns `(final_images, to_delete)` where final_images is kept
    followed by uploaded, and to_delete lists every current image that is no
    longer referenced, each once, in gallery order.
    """
    final_images = list(kept) + list(uploaded)
    referenced = set(final_images)

    to_delete = []
    for url in current:
        if url not in referenced and url not in to_delete:
            to_delete.append(url)
    return final_images, to_delete
