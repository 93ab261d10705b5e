import gettext

_ = gettext.translation('gitflow_ci', fallback=True).gettext
