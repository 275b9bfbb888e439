"""Read-only inspection of host resources that container runtimes use or leave behind."""